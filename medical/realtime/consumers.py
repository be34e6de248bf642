import json
from channels.generic.websocket import AsyncWebsocketConsumer

from medical.services.scheduling import SCHEDULE_GROUP


class ScheduleUpdatesConsumer(AsyncWebsocketConsumer):
    """Push ``schedule.refresh`` events when a consultation date is published."""
    GROUP = SCHEDULE_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def schedule_refresh(self, event):
        # event: {"type": "schedule.refresh", "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))
