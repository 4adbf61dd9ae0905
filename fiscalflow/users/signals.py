from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from fiscalflow.audit.utils import log_action


@receiver(post_save, sender=get_user_model())
def audit_user_created(sender, instance, created, **kwargs):
    """Record every new account in the audit log."""

    if not created:
        return
    log_action(
        "user_created",
        message=f"username={instance.username}",
        model_name="User",
        record_id=instance.pk,
    )
