import logging
import math

from django.db import transaction
from django.db.models import Count, Q

from donations.exceptions import NotFound, ValidationFailed
from donations.models import Barangay, Role, User
from donations.services.audit_service import AuditService
from donations.sms.phone import to_local

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
USER_UPDATABLE_FIELDS = ("email", "first_name", "last_name", "phone", "is_active")


class DirectoryService:
    """Admin management of user accounts and barangays."""

    def __init__(self):
        self.audit = AuditService()

    # Users

    def list_users(self, page=1, limit=DEFAULT_PAGE_SIZE, role=None, search=None) -> dict:
        """
        Page through users, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            role: Optional role filter ('all' means no filter)
            search: Matched against first name, last name and email

        Returns:
            dict: Contains 'users' and 'pagination' ({page, limit, total, pages})
        """
        page = max(int(page or 1), 1)
        limit = max(int(limit or DEFAULT_PAGE_SIZE), 1)

        users = User.objects.select_related("barangay").annotate(
            family_count=Count("families", distinct=True),
            claim_count=Count("claims", distinct=True),
        )
        if role and role != "all":
            users = users.filter(role=role)
        if search:
            users = users.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )

        total = users.count()
        offset = (page - 1) * limit
        return {
            "users": list(users.order_by("-created_at")[offset : offset + limit]),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    def get_user(self, user_id) -> User:
        user = User.objects.select_related("barangay").filter(pk=user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def _barangay_for_role(self, role, barangay_id):
        if role == Role.ADMIN:
            return None
        if role == Role.BARANGAY and not barangay_id:
            raise ValidationFailed("Barangay is required for Barangay Manager role")
        if not barangay_id:
            return None
        barangay = Barangay.objects.filter(pk=barangay_id).first()
        if barangay is None:
            raise ValidationFailed("Selected barangay does not exist")
        return barangay

    def _assign_manager(self, user, barangay):
        """Make user the one manager of barangay, releasing any previous assignment."""
        Barangay.objects.filter(manager=user).exclude(pk=barangay.pk).update(manager=None)
        barangay.manager = user
        barangay.save(update_fields=["manager", "updated_at"])

    def create_user(self, admin, data: dict) -> User:
        role = data.get("role")
        if role not in Role.values:
            raise ValidationFailed("Invalid role")
        if User.objects.filter(email__iexact=data["email"]).exists():
            raise ValidationFailed("User with this email already exists")
        barangay = self._barangay_for_role(role, data.get("barangay_id"))

        with transaction.atomic():
            user = User.objects.create_user(
                email=data["email"],
                password=data["password"],
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                phone=to_local(data["phone"]) if data.get("phone") else None,
                role=role,
                barangay=barangay,
                is_active=True,
            )
            if role == Role.BARANGAY:
                self._assign_manager(user, barangay)

        self.audit.record(
            admin, "USER_CREATED", f"Created user: {user.get_full_name()} ({user.email})"
        )
        return user

    def update_user(self, admin, user_id, data: dict) -> User:
        user = self.get_user(user_id)
        previous_role = user.role

        email = data.get("email")
        if email and email.lower() != user.email.lower():
            if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise ValidationFailed("Email already taken")

        role = data.get("role") or user.role
        if role not in Role.values:
            raise ValidationFailed("Invalid role")
        barangay_id = data["barangay_id"] if "barangay_id" in data else user.barangay_id
        barangay = self._barangay_for_role(role, barangay_id)

        with transaction.atomic():
            for field in USER_UPDATABLE_FIELDS:
                if field in data:
                    setattr(user, field, data[field])
            user.email = user.email.lower()
            if data.get("phone"):
                user.phone = to_local(data["phone"])
            if data.get("password"):
                user.set_password(data["password"])
            user.role = role
            user.barangay = barangay
            user.save()

            if role == Role.BARANGAY:
                self._assign_manager(user, barangay)
            elif previous_role == Role.BARANGAY:
                Barangay.objects.filter(manager=user).update(manager=None)

        self.audit.record(
            admin, "USER_UPDATED", f"Updated user: {user.get_full_name()} ({user.email})"
        )
        return user

    def deactivate_user(self, admin, user_id) -> User:
        user = self.get_user(user_id)
        if user.pk == admin.pk:
            raise ValidationFailed("Cannot delete your own account")
        user.is_active = False
        user.save(update_fields=["is_active", "updated_at"])
        self.audit.record(
            admin, "USER_DELETED", f"Deactivated user: {user.get_full_name()} ({user.email})"
        )
        return user

    # Barangays

    def list_barangays(self):
        return (
            Barangay.objects.select_related("manager")
            .annotate(
                resident_count=Count(
                    "users", filter=Q(users__role=Role.RESIDENT), distinct=True
                ),
                schedule_count=Count("schedules", distinct=True),
                claim_count=Count("claims", distinct=True),
            )
            .order_by("name")
        )

    def list_active_barangays(self):
        return Barangay.objects.filter(is_active=True).order_by("name")

    def get_barangay(self, barangay_id) -> Barangay:
        barangay = self.list_barangays().filter(pk=barangay_id).first()
        if barangay is None:
            raise NotFound("Barangay not found")
        return barangay

    def _validate_manager(self, manager_id, barangay=None):
        if not manager_id:
            return None
        manager = User.objects.filter(pk=manager_id, role=Role.BARANGAY).first()
        if manager is None:
            raise ValidationFailed("Invalid manager selected")
        managed = Barangay.objects.filter(manager=manager)
        if barangay is not None:
            managed = managed.exclude(pk=barangay.pk)
        if managed.exists():
            raise ValidationFailed("Manager is already assigned to another barangay")
        return manager

    def create_barangay(self, admin, data: dict) -> Barangay:
        code = data.get("code")
        if not data.get("name") or not code:
            raise ValidationFailed("Name and code are required")
        if Barangay.objects.filter(code=code).exists():
            raise ValidationFailed("Barangay code already exists")
        manager = self._validate_manager(data.get("manager_id"))

        with transaction.atomic():
            barangay = Barangay.objects.create(
                name=data["name"],
                code=code,
                description=data.get("description"),
                manager=manager,
                is_active=True,
            )
            if manager is not None:
                manager.barangay = barangay
                manager.save(update_fields=["barangay", "updated_at"])

        self.audit.record(admin, "BARANGAY_CREATED", f"Created barangay: {barangay.name} ({code})")
        return barangay

    def update_barangay(self, admin, barangay_id, data: dict) -> Barangay:
        barangay = Barangay.objects.filter(pk=barangay_id).first()
        if barangay is None:
            raise NotFound("Barangay not found")

        code = data.get("code")
        if code and code != barangay.code:
            if Barangay.objects.filter(code=code).exclude(pk=barangay.pk).exists():
                raise ValidationFailed("Barangay code already taken")

        with transaction.atomic():
            for field in ("name", "code", "description", "is_active"):
                if field in data:
                    setattr(barangay, field, data[field])
            if "manager_id" in data:
                manager = self._validate_manager(data["manager_id"], barangay)
                barangay.manager = manager
                if manager is not None:
                    manager.barangay = barangay
                    manager.save(update_fields=["barangay", "updated_at"])
            barangay.save()

        self.audit.record(
            admin, "BARANGAY_UPDATED", f"Updated barangay: {barangay.name} ({barangay.code})"
        )
        return barangay

    def deactivate_barangay(self, admin, barangay_id) -> Barangay:
        barangay = self.get_barangay(barangay_id)
        if barangay.resident_count or barangay.schedule_count:
            raise ValidationFailed(
                "Cannot delete barangay with existing residents or schedules. Deactivate instead."
            )
        barangay.is_active = False
        barangay.save(update_fields=["is_active", "updated_at"])
        self.audit.record(
            admin, "BARANGAY_DELETED", f"Deactivated barangay: {barangay.name} ({barangay.code})"
        )
        return barangay
