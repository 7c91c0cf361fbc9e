import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from donations.models import Family, Role, User

logger = logging.getLogger(__name__)

NO_ADDRESS = "Address not provided"


def family_address(user) -> str:
    parts = [user.purok, user.barangay.name if user.barangay_id else None, user.municipality]
    address = ", ".join(part for part in parts if part)
    return address or NO_ADDRESS


@receiver(post_save, sender=User)
def resident_post_save(sender, instance, created, **kwargs):
    """Every new resident heads a family in their barangay."""
    if not created or instance.role != Role.RESIDENT or not instance.barangay_id:
        return

    family = Family.objects.create(
        head=instance,
        barangay_id=instance.barangay_id,
        address=family_address(instance),
    )
    logger.info(f"Family {family.pk} created for resident {instance.pk}")
