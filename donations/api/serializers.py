from rest_framework import serializers

from donations.models import (
    AuditLog,
    Barangay,
    Claim,
    DonationSchedule,
    Family,
    FamilyMember,
    Role,
    SMSSettings,
    User,
)

DOCUMENT_FIELDS = {
    "idFilePath": "id_file_path",
    "idBackFilePath": "id_back_file_path",
    "barangayClearancePath": "barangay_clearance_path",
    "certificateOfIndigencyPath": "certificate_of_indigency_path",
    "proofOfResidencyPath": "proof_of_residency_path",
    "seniorCitizenIdPath": "senior_citizen_id_path",
    "pwdIdPath": "pwd_id_path",
    "ipCertificatePath": "ip_certificate_path",
    "schoolIdPath": "school_id_path",
    "soloParentIdPath": "solo_parent_id_path",
}


# Input


class RegisterSerializer(serializers.Serializer):
    """Resident self-registration body."""

    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    firstName = serializers.CharField(source="first_name", max_length=150)
    lastName = serializers.CharField(source="last_name", max_length=150)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    role = serializers.CharField(required=False, default=Role.RESIDENT)
    barangayId = serializers.IntegerField(source="barangay_id", required=False, allow_null=True)
    gender = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dateOfBirth = serializers.DateField(source="date_of_birth", required=False, allow_null=True)
    purok = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    municipality = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    educationalAttainment = serializers.CharField(
        source="educational_attainment", required=False, allow_blank=True, allow_null=True
    )
    isHeadOfFamily = serializers.BooleanField(source="is_head_of_family", required=False)

    def get_fields(self):
        fields = super().get_fields()
        for name, source in DOCUMENT_FIELDS.items():
            fields[name] = serializers.CharField(
                source=source, required=False, allow_blank=True, allow_null=True
            )
        return fields


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class UserWriteSerializer(serializers.Serializer):
    """Admin create/update body for user accounts."""

    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, required=False)
    firstName = serializers.CharField(source="first_name", max_length=150, required=False)
    lastName = serializers.CharField(source="last_name", max_length=150, required=False)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(choices=Role.choices)
    barangayId = serializers.IntegerField(source="barangay_id", required=False, allow_null=True)
    isActive = serializers.BooleanField(source="is_active", required=False)

    def validate(self, attrs):
        if not self.partial and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs


class BarangayWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    code = serializers.CharField(max_length=50, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    managerId = serializers.IntegerField(source="manager_id", required=False, allow_null=True)
    isActive = serializers.BooleanField(source="is_active", required=False)


class ScheduleWriteSerializer(serializers.Serializer):
    """Schedule body. Completeness is checked by the service so both update forms share it."""

    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateField(required=False, allow_null=True)
    startTime = serializers.TimeField(source="start_time", required=False, allow_null=True)
    endTime = serializers.TimeField(source="end_time", required=False, allow_null=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    maxRecipients = serializers.IntegerField(
        source="max_recipients", required=False, allow_null=True, min_value=1
    )
    targetClassification = serializers.CharField(
        source="target_classification", required=False, allow_blank=True, allow_null=True
    )
    type = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class FamilyMemberWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    relation = serializers.CharField(required=False, allow_blank=True)
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    dateOfBirth = serializers.DateField(source="date_of_birth", required=False, allow_null=True)
    educationLevel = serializers.CharField(
        source="education_level", required=False, allow_blank=True, allow_null=True
    )
    isIndigent = serializers.BooleanField(source="is_indigent", required=False)
    indigencyCertPath = serializers.CharField(
        source="indigency_cert_path", required=False, allow_blank=True, allow_null=True
    )
    isSeniorCitizen = serializers.BooleanField(source="is_senior_citizen", required=False)
    seniorCardPath = serializers.CharField(
        source="senior_card_path", required=False, allow_blank=True, allow_null=True
    )
    isPWD = serializers.BooleanField(source="is_pwd", required=False)
    pwdProofPath = serializers.CharField(
        source="pwd_proof_path", required=False, allow_blank=True, allow_null=True
    )
    isStudent = serializers.BooleanField(source="is_student", required=False)
    studentIdPath = serializers.CharField(
        source="student_id_path", required=False, allow_blank=True, allow_null=True
    )


class SMSSettingsWriteSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    isActive = serializers.BooleanField(source="is_active", required=False, default=False)


# Record references and query strings. Missing values are reported by the
# services; these only reject malformed ids.


class ScheduleReferenceSerializer(serializers.Serializer):
    scheduleId = serializers.IntegerField(source="schedule_id", required=False, allow_null=True)


class ClaimForResidentSerializer(ScheduleReferenceSerializer):
    residentId = serializers.IntegerField(source="resident_id", required=False, allow_null=True)
    familyMemberId = serializers.IntegerField(
        source="family_member_id", required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ClassifyResidentSerializer(serializers.Serializer):
    residentId = serializers.IntegerField(source="resident_id", required=False, allow_null=True)
    classification = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RegistrationDecisionSerializer(serializers.Serializer):
    userId = serializers.IntegerField(source="user_id", required=False, allow_null=True)
    action = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class UserListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False, default=10)
    role = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)


class DonationReportQuerySerializer(serializers.Serializer):
    barangayId = serializers.IntegerField(source="barangay_id", required=False, allow_null=True)
    startDate = serializers.CharField(source="start_date", required=False, allow_blank=True)
    endDate = serializers.CharField(source="end_date", required=False, allow_blank=True)


# Output


class BarangayBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Barangay
        fields = ["id", "name", "code"]


class UserBriefSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")

    class Meta:
        model = User
        fields = ["id", "firstName", "lastName", "email", "role"]


class UserSerializer(serializers.ModelSerializer):
    """User account. The password hash is never exposed."""

    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    barangayId = serializers.IntegerField(source="barangay_id", allow_null=True)
    barangay = BarangayBriefSerializer(read_only=True)
    isActive = serializers.BooleanField(source="is_active")
    familyClassification = serializers.CharField(source="family_classification")
    dateOfBirth = serializers.DateField(source="date_of_birth")
    educationalAttainment = serializers.CharField(source="educational_attainment")
    isHeadOfFamily = serializers.BooleanField(source="is_head_of_family")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "firstName",
            "lastName",
            "phone",
            "role",
            "barangayId",
            "barangay",
            "isActive",
            "familyClassification",
            "gender",
            "dateOfBirth",
            "purok",
            "municipality",
            "educationalAttainment",
            "isHeadOfFamily",
            "createdAt",
        ]
        read_only_fields = fields

    def get_fields(self):
        fields = super().get_fields()
        for name, source in DOCUMENT_FIELDS.items():
            fields[name] = serializers.CharField(source=source, read_only=True)
        return fields


class UserListSerializer(UserSerializer):
    familyCount = serializers.IntegerField(source="family_count", read_only=True)
    claimCount = serializers.IntegerField(source="claim_count", read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ["familyCount", "claimCount"]


class BarangaySerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active")
    managerId = serializers.IntegerField(source="manager_id", allow_null=True)
    manager = UserBriefSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Barangay
        fields = ["id", "name", "code", "description", "isActive", "managerId", "manager", "createdAt"]
        read_only_fields = fields


class BarangayListSerializer(BarangaySerializer):
    residentCount = serializers.IntegerField(source="resident_count", read_only=True)
    scheduleCount = serializers.IntegerField(source="schedule_count", read_only=True)
    claimCount = serializers.IntegerField(source="claim_count", read_only=True)

    class Meta(BarangaySerializer.Meta):
        fields = BarangaySerializer.Meta.fields + ["residentCount", "scheduleCount", "claimCount"]


class FamilyMemberSerializer(serializers.ModelSerializer):
    familyId = serializers.IntegerField(source="family_id")
    dateOfBirth = serializers.DateField(source="date_of_birth")
    educationLevel = serializers.CharField(source="education_level")
    isIndigent = serializers.BooleanField(source="is_indigent")
    indigencyCertPath = serializers.CharField(source="indigency_cert_path")
    indigentVerificationStatus = serializers.CharField(source="indigent_verification_status")
    isSeniorCitizen = serializers.BooleanField(source="is_senior_citizen")
    seniorCardPath = serializers.CharField(source="senior_card_path")
    seniorVerificationStatus = serializers.CharField(source="senior_verification_status")
    isPWD = serializers.BooleanField(source="is_pwd")
    pwdProofPath = serializers.CharField(source="pwd_proof_path")
    pwdVerificationStatus = serializers.CharField(source="pwd_verification_status")
    isStudent = serializers.BooleanField(source="is_student")
    studentIdPath = serializers.CharField(source="student_id_path")
    studentVerificationStatus = serializers.CharField(source="student_verification_status")

    class Meta:
        model = FamilyMember
        fields = [
            "id",
            "familyId",
            "name",
            "relation",
            "age",
            "dateOfBirth",
            "educationLevel",
            "isIndigent",
            "indigencyCertPath",
            "indigentVerificationStatus",
            "isSeniorCitizen",
            "seniorCardPath",
            "seniorVerificationStatus",
            "isPWD",
            "pwdProofPath",
            "pwdVerificationStatus",
            "isStudent",
            "studentIdPath",
            "studentVerificationStatus",
        ]
        read_only_fields = fields


class FamilySerializer(serializers.ModelSerializer):
    headId = serializers.IntegerField(source="head_id")
    barangayId = serializers.IntegerField(source="barangay_id")
    members = FamilyMemberSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Family
        fields = ["id", "headId", "barangayId", "address", "members", "createdAt"]
        read_only_fields = fields


class ResidentSerializer(UserSerializer):
    """Resident with their families and members, for barangay officials."""

    families = FamilySerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ["families"]


class ClaimSerializer(serializers.ModelSerializer):
    familyId = serializers.IntegerField(source="family_id")
    familyHead = serializers.CharField(source="family.head.get_full_name", read_only=True)
    scheduleId = serializers.IntegerField(source="schedule_id")
    scheduleTitle = serializers.CharField(source="schedule.title", read_only=True)
    scheduleDate = serializers.DateField(source="schedule.date", read_only=True)
    claimedBy = serializers.IntegerField(source="claimed_by_id")
    claimedByName = serializers.CharField(source="claimed_by.get_full_name", read_only=True)
    barangayId = serializers.IntegerField(source="barangay_id")
    isVerified = serializers.BooleanField(source="is_verified")
    verifiedAt = serializers.DateTimeField(source="verified_at")
    verifiedBy = serializers.IntegerField(source="verified_by_id", allow_null=True)
    claimedAt = serializers.DateTimeField(source="claimed_at")
    claimedAtPhysical = serializers.DateTimeField(source="claimed_at_physical")

    class Meta:
        model = Claim
        fields = [
            "id",
            "familyId",
            "familyHead",
            "scheduleId",
            "scheduleTitle",
            "scheduleDate",
            "claimedBy",
            "claimedByName",
            "barangayId",
            "status",
            "isVerified",
            "verifiedAt",
            "verifiedBy",
            "claimedAt",
            "claimedAtPhysical",
            "notes",
        ]
        read_only_fields = fields


class ScheduleSerializer(serializers.ModelSerializer):
    """Donation schedule; effectiveStatus is the status as of today."""

    barangayId = serializers.IntegerField(source="barangay_id")
    startTime = serializers.TimeField(source="start_time", format="%H:%M")
    endTime = serializers.TimeField(source="end_time", format="%H:%M")
    maxRecipients = serializers.IntegerField(source="max_recipients", allow_null=True)
    targetClassification = serializers.CharField(source="target_classification", allow_null=True)
    effectiveStatus = serializers.SerializerMethodField()
    claimCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = DonationSchedule
        fields = [
            "id",
            "barangayId",
            "title",
            "description",
            "date",
            "startTime",
            "endTime",
            "location",
            "maxRecipients",
            "targetClassification",
            "type",
            "status",
            "effectiveStatus",
            "claimCount",
            "createdAt",
        ]
        read_only_fields = fields

    def get_effectiveStatus(self, obj):
        return obj.effective_status()

    def get_claimCount(self, obj):
        count = getattr(obj, "claim_count", None)
        return count if count is not None else obj.claims.count()


class ScheduleDetailSerializer(ScheduleSerializer):
    claims = ClaimSerializer(many=True, read_only=True)

    class Meta(ScheduleSerializer.Meta):
        fields = ScheduleSerializer.Meta.fields + ["claims"]


class ResidentScheduleSerializer(ScheduleSerializer):
    hasClaimed = serializers.BooleanField(source="has_claimed", read_only=True)

    class Meta(ScheduleSerializer.Meta):
        fields = [f for f in ScheduleSerializer.Meta.fields if f != "claimCount"] + ["hasClaimed"]


class AuditLogSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", allow_null=True)
    user = UserBriefSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = AuditLog
        fields = ["id", "userId", "user", "actor", "action", "details", "createdAt"]
        read_only_fields = fields


class SMSSettingsSerializer(serializers.ModelSerializer):
    """SMS account without its password."""

    isActive = serializers.BooleanField(source="is_active")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = SMSSettings
        fields = ["id", "username", "isActive", "createdAt", "updatedAt"]
        read_only_fields = fields


# Plain result dicts


class NotificationResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    sentCount = serializers.IntegerField(source="sent_count")
    failedCount = serializers.IntegerField(source="failed_count")
    errors = serializers.ListField(child=serializers.CharField())
    messageId = serializers.CharField(source="message_id", allow_null=True)
    recipients = serializers.ListField(child=serializers.DictField())


class BackupSerializer(serializers.Serializer):
    name = serializers.CharField()
    filename = serializers.CharField()
    size = serializers.IntegerField()
    createdAt = serializers.DateTimeField(source="created_at")
    modifiedAt = serializers.DateTimeField(source="modified_at")


class UploadResultSerializer(serializers.Serializer):
    success = serializers.SerializerMethodField()
    filePath = serializers.CharField(source="file_path")
    fileName = serializers.CharField(source="file_name")
    fileSize = serializers.IntegerField(source="file_size")
    fileType = serializers.CharField(source="file_type")

    def get_success(self, obj):
        return True


class SystemStatsSerializer(serializers.Serializer):
    totalUsers = serializers.IntegerField(source="total_users")
    activeUsers = serializers.IntegerField(source="active_users")
    totalBarangays = serializers.IntegerField(source="total_barangays")
    totalSchedules = serializers.IntegerField(source="total_schedules")
    totalClaims = serializers.IntegerField(source="total_claims")
    upcomingSchedules = serializers.IntegerField(source="upcoming_schedules")


class BarangayStatsSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()
    totalSchedules = serializers.IntegerField(source="total_schedules")
    totalClaims = serializers.IntegerField(source="total_claims")
    totalResidents = serializers.IntegerField(source="total_residents")
    isActive = serializers.BooleanField(source="is_active")


class ReportRowSerializer(serializers.Serializer):
    scheduleTitle = serializers.CharField(source="schedule_title")
    familyHead = serializers.CharField(source="family_head")
    claimedBy = serializers.CharField(source="claimed_by")
    barangay = serializers.CharField()
    claimDate = serializers.CharField(source="claim_date")
    status = serializers.CharField()
    notes = serializers.CharField(allow_blank=True)


class ReportSummarySerializer(serializers.Serializer):
    totalClaims = serializers.IntegerField(source="total_claims")
    totalSchedules = serializers.IntegerField(source="total_schedules")
    totalFamilies = serializers.IntegerField(source="total_families")
    reportPeriod = serializers.CharField(source="report_period")


class DonationReportSerializer(serializers.Serializer):
    title = serializers.CharField()
    date = serializers.CharField()
    rows = ReportRowSerializer(many=True)
    summary = ReportSummarySerializer()


class BarangaySummarySerializer(serializers.Serializer):
    barangay = serializers.DictField()
    totalResidents = serializers.IntegerField(source="total_residents")
    activeResidents = serializers.IntegerField(source="active_residents")
    pendingResidents = serializers.IntegerField(source="pending_residents")
    totalFamilies = serializers.IntegerField(source="total_families")
    totalSchedules = serializers.IntegerField(source="total_schedules")
    upcomingSchedules = serializers.IntegerField(source="upcoming_schedules")
    totalClaims = serializers.IntegerField(source="total_claims")
    claimsThisMonth = serializers.IntegerField(source="claims_this_month")
