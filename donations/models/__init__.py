from .barangay import Barangay
from .user import User, Role, FamilyClassification
from .family import Family, FamilyMember, VerificationStatus, Relation, EducationLevel
from .schedule import DonationSchedule, ScheduleStatus, ScheduleType
from .claim import Claim, ClaimStatus
from .sms_settings import SMSSettings
from .audit_log import AuditLog, SYSTEM_ACTOR

__all__ = [
    "Barangay",
    "User",
    "Role",
    "FamilyClassification",
    "Family",
    "FamilyMember",
    "VerificationStatus",
    "Relation",
    "EducationLevel",
    "DonationSchedule",
    "ScheduleStatus",
    "ScheduleType",
    "Claim",
    "ClaimStatus",
    "SMSSettings",
    "AuditLog",
    "SYSTEM_ACTOR",
]
