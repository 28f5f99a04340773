"""Test helpers shared across modules."""


class FakeCompanionAI:
    """Stand-in for CompanionAI that records calls instead of hitting Cohere."""

    enabled = True

    def __init__(self, reply: str = "Hi! Lovely to hear from you.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate_response(self, message, settings, context):
        self.calls.append({"message": message, "settings": settings, "context": list(context)})
        if self.error:
            raise self.error
        return self.reply


COMPANION_SETTINGS = {
    "name": "Nova",
    "personality": "Warm, curious and a little playful",
    "description": "Grew up reading science fiction",
    "interests": ["astronomy", "jazz"],
    "avatar": "https://example.com/nova.png",
    "creativity": 0.4,
}


def register(client, username: str = "alice", password: str = "s3cret-pass"):
    return client.post("/api/register", json={"username": username, "password": password})


def login(client, username: str = "alice", password: str = "s3cret-pass"):
    return client.post("/api/login", json={"username": username, "password": password})
