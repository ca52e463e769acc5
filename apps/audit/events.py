class AuditEvents:
    # Accounts
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED_INACTIVE = "login_blocked_inactive"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_CONFIRMED = "password_reset_confirmed"

    # Application lifecycle
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    APPLICATION_SPECIAL_APPROVAL = "application_special_approval"
    ENROLLMENT_SUBMITTED = "enrollment_submitted"
    ENROLLMENT_FILES_REJECTED = "enrollment_files_rejected"
    INTERN_ONBOARDED = "intern_onboarded"
    INTERNSHIPS_COMPLETED = "internships_completed"

    # Reports
    DAILY_REPORT_SUBMITTED = "daily_report_submitted"
    DAILY_REPORT_DUPLICATE = "daily_report_duplicate"

    # Files
    FILE_DOWNLOADED = "file_downloaded"
    FILE_ACCESS_DENIED = "file_access_denied"
