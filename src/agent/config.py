"""Chat service configuration with environment variable loading.

Pydantic-based configuration for the Bedrock Converse forwarding service.
Region and model are taken as given; a bad value surfaces as a remote error.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

SYSTEM_PROMPT = """
You are a personalized travel planning assistant with vision capabilities. When users share images of destinations,
landmarks, food, or travel-related content, analyze them and provide relevant travel advice. Create personalized
travel planning experiences by greeting users warmly and inquiring about their travel preferences such as destination,
dates, budget, and interests. Based on their input and any images they share, suggest tailored itineraries that include
popular attractions, local experiences, and hidden gems, along with accommodation options across various price ranges
and styles. Provide transportation recommendations, including flights and car rentals, along with estimated costs and
travel times. Recommend dining experiences that align with dietary needs, and share insights on local customs,
necessary travel documents, and packing essentials. When analyzing images, describe what you see and provide relevant
travel recommendations based on the visual content. Highlight the importance of travel insurance, offer real-time
updates on weather and events, and allow users to save and modify their itineraries. Additionally, provide a budget
tracking feature and the option to book flights and accommodations directly or through trusted platforms, all while
maintaining a warm and approachable tone to enhance the excitement of trip planning.
"""


class ChatConfig(BaseModel):
    """Configuration for the chat forwarding service.

    Attributes:
        aws_region: AWS region hosting the Bedrock runtime.
        model_id: Bedrock model identifier passed as ``modelId``.
        aws_profile: Optional named AWS profile for the boto3 session.
        system_prompt: System prompt sent with every exchange.
        temperature: Sampling temperature.
        max_tokens: Maximum tokens in generated response.
        connect_timeout: Seconds to wait for a connection to Bedrock.
        read_timeout: Seconds to wait for a Converse response.
    """

    aws_region: str | None = Field(
        default_factory=lambda: os.getenv("AWS_REGION") or None,
        description="AWS region for the Bedrock runtime client",
    )
    model_id: str = Field(
        default_factory=lambda: os.getenv("MODEL_ID", ""),
        description="Bedrock model identifier",
    )
    aws_profile: str | None = Field(
        default_factory=lambda: os.getenv("AWS_PROFILE") or None,
        description="Named AWS profile (None for default credential chain)",
    )
    system_prompt: str = Field(default=SYSTEM_PROMPT)
    temperature: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        description="Maximum tokens in generated response",
    )
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(
        default_factory=lambda: float(os.getenv("BEDROCK_READ_TIMEOUT", "60")),
        gt=0,
        description="Upper bound on waiting for a Converse response",
    )


def get_chat_config() -> ChatConfig:
    """Create chat configuration from environment.

    Returns:
        Configured ChatConfig instance.
    """
    return ChatConfig()
