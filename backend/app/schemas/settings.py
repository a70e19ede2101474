from datetime import datetime
from typing import Optional

from pydantic import create_model

from app.models.app_settings import KEY_FIELDS, WEBHOOK_FIELDS

# every key and webhook column, all optional
_FIELDS = {name: (Optional[str], None) for name in KEY_FIELDS + WEBHOOK_FIELDS}

SettingsUpdate = create_model("SettingsUpdate", **_FIELDS)


class SettingsOut(create_model("SettingsFields", **_FIELDS)):
    id: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
