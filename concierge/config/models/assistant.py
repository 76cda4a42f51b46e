"""Assistant persona configuration."""

from pydantic import BaseModel, Field


class AssistantConfig(BaseModel):
    """Who the assistant is and what it can arrange for the resident."""

    name: str = Field(default="Aisha", description="Assistant display and speaker name")
    resident_name: str = Field(default="Prithvi", description="Resident addressed in greetings")
    organization: str = Field(
        default="Emaar", description="Residence operator named in the persona"
    )
    service: str = Field(
        default="Access Card Replacement",
        description="Service confirmed by a completed request",
    )
    fee: str = Field(default="250 AED", description="Fee quoted for the service")
    greeting: str = Field(
        default="Hello {resident}. I am {assistant}. How can I help you?",
        description="Greeting template spoken at session start",
    )

    def render_greeting(self, resident_name: str | None = None) -> str:
        """Fill the greeting template for a resident."""
        return self.greeting.format(
            resident=resident_name or self.resident_name,
            assistant=self.name,
        )
