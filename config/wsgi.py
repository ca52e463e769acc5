import os

from django.core.wsgi import get_wsgi_application

from common.process import install_crash_handler

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

install_crash_handler()
application = get_wsgi_application()
