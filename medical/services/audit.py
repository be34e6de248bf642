from typing import Optional, Any, Dict
from django.contrib.auth import get_user_model
from medical.models import AuditEvent

User = get_user_model()

def log_action(*, user=None, user_id: Optional[int]=None, action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    if user is not None and getattr(user, 'is_authenticated', False):
        user_id = user.id
    return AuditEvent.objects.create(
        user_id=user_id,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )
