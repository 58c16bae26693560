import enum


class EmailBackend(str, enum.Enum):
    smtp = "smtp"
    api = "api"
    none = "none"


class NotificationKind(str, enum.Enum):
    stock_saved = "STOCK_SAVED"
    hospital_welcome = "HOSPITAL_WELCOME"
    donor_welcome = "DONOR_WELCOME"
    blood_request = "BLOOD_REQUEST"
