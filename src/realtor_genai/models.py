from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _FormModel(BaseModel):
    # Forms post camelCase keys; numeric inputs (bedrooms, price...) are kept as text.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class SocialPostRequest(_FormModel):
    property_address: str | None = None
    listing_price: str | None = None
    property_type: str | None = None
    bedrooms: str | None = None
    bathrooms: str | None = None
    square_feet: str | None = None
    has_open_house: bool | None = None
    open_house_details: str | None = None
    key_features: str | None = None
    neighborhood_highlights: str | None = None
    call_to_action: str | None = None
    listing_agent: str | None = None
    platform: str | None = None
    target_audience: str | None = None
    hashtags: str | None = None
    tone: str | None = None


class ListingRequest(_FormModel):
    property_type: str | None = None
    bedrooms: str | None = None
    bathrooms: str | None = None
    square_feet: str | None = None
    features: str | None = None
    selling_points: str | None = None
    target_buyer: str | None = None
    tone: str | None = None
    asking_price: str | None = None
    hoa_fees: str | None = None


EmailType = Literal["broadcast", "follow-up", "transactional"]


class EmailRequest(_FormModel):
    email_type: EmailType = "broadcast"
    subject: str | None = None
    target_audience: str | None = None
    tone: str | None = None

    # Broadcast
    broadcast_purpose: str | None = None
    newsletter_topic: str | None = None
    promotion_details: str | None = None
    market_update_info: str | None = None
    property_address: str | None = None
    property_price: str | None = None
    property_type: str | None = None
    property_highlights: str | None = None
    open_house_date: str | None = None
    open_house_time: str | None = None
    special_instructions: str | None = None
    sale_price: str | None = None
    days_on_market: str | None = None
    sale_highlights: str | None = None
    previous_price: str | None = None
    new_price: str | None = None
    neighborhood_name: str | None = None
    neighborhood_highlights: str | None = None
    season: str | None = None
    tips_topic: str | None = None
    tips_content: str | None = None
    event_name: str | None = None
    event_date: str | None = None
    event_time: str | None = None
    event_location: str | None = None
    event_details: str | None = None
    holiday_occasion: str | None = None
    holiday_message: str | None = None

    # Follow-up
    number_of_emails: int = Field(default=3, ge=1, le=10)
    follow_up_sequence_type: str | None = None
    custom_sequence_type: str | None = None
    email_frequency: str | None = None
    custom_email_frequency: str | None = None
    initial_contact_context: str | None = None
    sequence_goals: str | None = None
    value_proposition: str | None = None

    # Transactional
    transaction_type: str | None = None
    user_name: str | None = None
    property_details: str | None = None
    appointment_details: str | None = None
    open_house_details: str | None = None

    # Shared customization
    call_to_action: str | None = None
    company_info: str | None = None
    agent_name: str | None = None
    agent_title: str | None = None
    include_testimonial: bool = False
    testimonial_text: str | None = None


class GenerationResponse(BaseModel):
    variations: list[str]


# Records mirroring the hosted database tables. Passed through unchanged.

ContentType = Literal["property-listing", "social-media", "email-campaign"]


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str | None = None
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    website: str | None = None
    company_name: str | None = None
    company_logo: str | None = None
    phone_number: str | None = None
    role: str | None = None
    bio: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ImageUploadResponse(BaseModel):
    url: str
    path: str
    bucket: str


class PropertyProject(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str | None = None
    user_id: str
    name: str
    address: str = ""
    property_type: str = ""
    bedrooms: str = ""
    bathrooms: str = ""
    square_feet: str = ""
    listing_price: str = ""
    features: str = ""
    selling_points: str = ""
    target_buyer: str = ""
    neighborhood_highlights: str = ""
    image_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ProjectContentIn(BaseModel):
    user_id: str
    content_type: ContentType
    content: str
    metadata: dict[str, Any] | None = None


class GenerationIn(BaseModel):
    user_id: str
    content: str
    type: str
    metadata: str | None = None
    project_id: str | None = None
