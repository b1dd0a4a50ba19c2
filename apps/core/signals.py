# apps/core/signals.py

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import ProjectMember, User

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def log_new_user(sender, instance, created, **kwargs):
    """
    Audit trail of new accounts
    """
    if created:
        logger.info(f"👤 New user registered: {instance.email}")


@receiver(post_save, sender=ProjectMember)
def log_new_membership(sender, instance, created, **kwargs):
    """
    Audit trail of project memberships
    """
    if created:
        logger.info(
            f"👥 {instance.user.email} joined project {instance.project_id} as {instance.role}"
        )


@receiver(post_delete, sender=ProjectMember)
def log_removed_membership(sender, instance, **kwargs):
    logger.info(f"👋 Membership removed: user {instance.user_id} from project {instance.project_id}")
