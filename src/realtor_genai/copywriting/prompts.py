from __future__ import annotations

from realtor_genai.models import EmailRequest, ListingRequest, SocialPostRequest
from realtor_genai.providers.base import ChatPrompt


SOCIAL_POST_SYSTEM = (
    "You are a top-performing real estate social media manager who creates engaging, "
    "platform-optimized property listings. You understand the best practices and character "
    "limits for different social media platforms, and know how to create content that drives "
    "engagement and leads."
)

LISTING_SYSTEM = (
    "You are a top-performing real estate copywriter who creates compelling property listings. "
    "Your listings are detailed, engaging, and designed to showcase properties in their best light. "
    "You know that bullet points make content more scannable and help highlight key features effectively."
)

EMAIL_SYSTEM = (
    "You are a top-performing real estate email copywriter who creates compelling, personalized, "
    "and effective email content. Your emails are engaging, professional, and designed to drive action. "
    "You understand the real estate market and the specific challenges and opportunities that real "
    "estate agents face. You know how to craft messages that resonate with different types of real "
    "estate clients including buyers, sellers, past clients, and prospects."
)

EMAIL_SYSTEM_BY_TYPE = {
    "broadcast": (
        " You specialize in creating broadcast emails that engage large audiences while still feeling "
        "personal and relevant. Your emails incorporate real estate terminology and best practices."
    ),
    "follow-up": (
        " You specialize in creating follow-up email sequences that maintain interest and gently guide "
        "prospects toward a decision. You understand the real estate sales cycle and the importance of "
        "consistent follow-up."
    ),
    "transactional": (
        " You specialize in creating transactional emails that deliver important information while "
        "maintaining a personal touch and encouraging further engagement. You understand the legal and "
        "practical requirements of real estate transactions."
    ),
}

BROADCAST_PURPOSES = {
    "new-listing": "New Listing Announcement",
    "open-house": "Open House Invitation",
    "just-sold": "Just Sold Announcement",
    "price-reduction": "Price Reduction Alert",
    "market-update": "Market Update",
    "neighborhood": "Neighborhood Newsletter",
    "home-tips": "Seasonal Home Tips",
    "client-event": "Client Appreciation Event",
    "holiday": "Holiday/Seasonal Greeting",
    "newsletter": "Newsletter",
    "promotion": "Promotion/Special Offer",
    "event": "Event Announcement",
}

SEQUENCE_TYPES = {
    "market-report": "Market Report Opt-in Follow-ups",
    "open-house": "Open House Attendee Follow-ups",
    "property-interest": "Property Interest Follow-ups",
    "buyer-consultation": "Buyer Consultation Follow-ups",
    "listing-presentation": "Listing Presentation Follow-ups",
}

EMAIL_TIMINGS = {
    "3-5-7": "3 days after initial contact, then 5 days later, then 7 days later",
    "7-14-21": "7 days after initial contact, then 14 days later, then 21 days later",
    "2-3-4": "2 days after initial contact, then 3 days later, then 4 days later",
    "5-10-15": "5 days after initial contact, then 10 days later, then 15 days later",
}


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def _item(label: str, value: str | None) -> str:
    """A ``- Label: value`` line, or empty when the value is absent."""
    if not _present(value):
        return ""
    return f"- {label}: {value.strip()}"


def _or(value: str | None, fallback: str) -> str:
    return value.strip() if _present(value) else fallback


def _compose(*blocks: str) -> str:
    # Absent fields render as "" and must not leave blank lines behind.
    lines: list[str] = []
    for block in blocks:
        for ln in block.splitlines():
            if ln.strip():
                lines.append(ln.rstrip())
    return "\n".join(lines)


def _section(title: str, *items: str) -> str:
    present = [i for i in items if i]
    if not present:
        return ""
    return "\n".join([title, *present])


def build_social_post_prompt(req: SocialPostRequest) -> ChatPrompt:
    tone = _or(req.tone, "engaging")
    platform = _or(req.platform, "social media")
    property_type = _or(req.property_type, "property")

    open_house = ""
    if req.has_open_house and _present(req.open_house_details):
        open_house = _item("Open House", req.open_house_details)

    must_include = [
        "1. An attention-grabbing opening",
        "2. Key property features",
    ]
    if _present(req.call_to_action):
        must_include.append(f'{len(must_include) + 1}. The call to action: "{req.call_to_action.strip()}"')
    must_include.append(
        f"{len(must_include) + 1}. Relevant hashtags: {_or(req.hashtags, '#RealEstate #[City]RealEstate')}"
    )

    user = _compose(
        f"Create a {tone} social media post for {platform} about a {property_type} listing.",
        _section(
            "Property details:",
            _item("Address", req.property_address),
            _item("Price", req.listing_price),
            _item("Bedrooms", req.bedrooms),
            _item("Bathrooms", req.bathrooms),
            _item("Square Feet", req.square_feet),
            _item("Listed by", req.listing_agent),
        ),
        _section(
            "Additional details to incorporate (if provided):",
            _item("Key Features", req.key_features),
            open_house,
            _item("Area Highlights", req.neighborhood_highlights),
            _item("Target Audience", req.target_audience),
        ),
        "Platform-specific requirements:\n"
        "- Instagram: Focus on visual appeal, use emojis strategically, max 2200 characters\n"
        "- Facebook: More detailed, conversational tone, include property highlights\n"
        "- Twitter: Concise, impactful, max 280 characters\n"
        "- LinkedIn: Professional tone, focus on investment potential\n"
        "- Pinterest: Visual description, lifestyle focus",
        "Must include:\n" + "\n".join(must_include),
        "Format requirements:\n"
        "- Use appropriate line breaks and emojis for readability\n"
        "- Include price and basic specs (beds/baths) near the beginning\n"
        "- End with call to action and hashtags\n"
        "- Match the tone and length to the platform\n"
        "- If open house is scheduled, highlight it prominently",
        "Additional guidelines:\n"
        "- Make it scannable and engaging\n"
        "- Include numbers and stats when possible\n"
        "- Use emojis relevant to property features\n"
        "- Incorporate location benefits\n"
        "- If targeting specific buyers, use appropriate language",
    )
    return ChatPrompt(system=SOCIAL_POST_SYSTEM, user=user)


def build_listing_prompt(req: ListingRequest) -> ChatPrompt:
    tone = _or(req.tone, "professional")
    property_type = _or(req.property_type, "property")
    audience = f" targeting {req.target_buyer.strip()}" if _present(req.target_buyer) else ""

    must_include = ['- 1 emotional hook (e.g., "Picture yourself...")']
    if _present(req.features):
        must_include.append(f"- A section with 3-5 bullet points highlighting key features from: {req.features.strip()}")
    if _present(req.selling_points):
        must_include.append(
            f"- A section with 3-5 bullet points showcasing unique selling points from: {req.selling_points.strip()}"
        )
    must_include.append('- 1 urgency driver (e.g., "Rare opportunity")')
    if _present(req.hoa_fees):
        must_include.append("- Mention what amenities or services the HOA fees cover")
    if _present(req.asking_price):
        must_include.append("- Include a value proposition for the asking price")

    user = _compose(
        f"Write a {tone} property description for a {property_type}{audience}.",
        _section(
            "Property details:",
            _item("Bedrooms", req.bedrooms),
            _item("Bathrooms", req.bathrooms),
            _item("Square Feet", req.square_feet),
            _item("Asking Price", req.asking_price),
            _item("HOA Fees", req.hoa_fees),
        ),
        "Must include:\n" + "\n".join(must_include),
        "Format requirements:\n"
        "- Start with 1-2 engaging paragraphs\n"
        '- Include a "Key Features" section with bullet points\n'
        "- Include a \"Why You'll Love This Home\" section with bullet points\n"
        "- End with 1-2 compelling paragraphs including the urgency driver\n"
        "- Total length should be 300-400 words",
        'Avoid clichés like "turnkey" or "perfect for entertaining."\n'
        "Make the bullet points concise, specific, and benefit-oriented.",
    )
    return ChatPrompt(system=LISTING_SYSTEM, user=user)


def _broadcast_details(req: EmailRequest) -> str:
    purpose = req.broadcast_purpose or ""
    if purpose == "new-listing":
        return _compose(
            "Property details:",
            f"- Address: {_or(req.property_address, '[Address not provided]')}",
            f"- Price: {_or(req.property_price, '[Price not provided]')}",
            f"- Type: {_or(req.property_type, '[Type not provided]')}",
            f"- Highlights: {_or(req.property_highlights, '[Highlights not provided]')}",
        )
    if purpose == "open-house":
        return _compose(
            "Open House details:",
            f"- Property Address: {_or(req.property_address, '[Address not provided]')}",
            f"- Date: {_or(req.open_house_date, '[Date not provided]')}",
            f"- Time: {_or(req.open_house_time, '[Time not provided]')}",
            f"- Property Highlights: {_or(req.property_highlights, '[Highlights not provided]')}",
            _item("Special Instructions", req.special_instructions),
        )
    if purpose == "just-sold":
        return _compose(
            "Just Sold details:",
            f"- Property Address: {_or(req.property_address, '[Address not provided]')}",
            f"- Sale Price: {_or(req.sale_price, '[Price information not provided]')}",
            f"- Days on Market: {_or(req.days_on_market, '[Days on market not provided]')}",
            f"- Sale Highlights: {_or(req.sale_highlights, '[Sale highlights not provided]')}",
        )
    if purpose == "price-reduction":
        return _compose(
            "Price Reduction details:",
            f"- Property Address: {_or(req.property_address, '[Address not provided]')}",
            f"- Previous Price: {_or(req.previous_price, '[Previous price not provided]')}",
            f"- New Price: {_or(req.new_price, '[New price not provided]')}",
            f"- Property Highlights: {_or(req.property_highlights, '[Highlights not provided]')}",
        )
    if purpose == "market-update":
        return f"Market Update Information: {_or(req.market_update_info, '[Market information not provided]')}"
    if purpose == "neighborhood":
        return _compose(
            "Neighborhood Newsletter details:",
            f"- Neighborhood/Area: {_or(req.neighborhood_name, '[Neighborhood name not provided]')}",
            f"- Highlights & Updates: {_or(req.neighborhood_highlights, '[Neighborhood highlights not provided]')}",
        )
    if purpose == "home-tips":
        return _compose(
            "Seasonal Home Tips:",
            f"- Season/Occasion: {_or(req.season, '[Season not specified]')}",
            f"- Tips Topic: {_or(req.tips_topic, '[Topic not provided]')}",
            f"- Tips Content: {_or(req.tips_content, '[Content not provided]')}",
        )
    if purpose == "client-event":
        return _compose(
            "Client Appreciation Event:",
            f"- Event Name: {_or(req.event_name, '[Event name not provided]')}",
            f"- Date: {_or(req.event_date, '[Date not provided]')}",
            f"- Time: {_or(req.event_time, '[Time not provided]')}",
            f"- Location: {_or(req.event_location, '[Location not provided]')}",
            f"- Event Details: {_or(req.event_details, '[Details not provided]')}",
        )
    if purpose == "holiday":
        return _compose(
            "Holiday/Seasonal Greeting:",
            f"- Occasion: {_or(req.holiday_occasion, '[Occasion not specified]')}",
            f"- Message: {_or(req.holiday_message, '[Message not provided]')}",
        )
    if purpose == "newsletter":
        return f"Newsletter topic: {_or(req.newsletter_topic, '[Topic not provided]')}"
    if purpose == "promotion":
        return f"Promotion details: {_or(req.promotion_details, '[Details not provided]')}"
    return ""


def _signature_lines(req: EmailRequest, cta_label: str = "Call to action", company: bool = True) -> str:
    testimonial = ""
    if req.include_testimonial and _present(req.testimonial_text):
        testimonial = f'Include this testimonial: "{req.testimonial_text.strip()}"'
    return _compose(
        f"{cta_label}: {req.call_to_action.strip()}" if _present(req.call_to_action) else "",
        f"Company/Brokerage information: {req.company_info.strip()}" if company and _present(req.company_info) else "",
        f"Agent name: {req.agent_name.strip()}" if _present(req.agent_name) else "",
        f"Agent title: {req.agent_title.strip()}" if _present(req.agent_title) else "",
        testimonial,
    )


def build_email_prompt(req: EmailRequest) -> ChatPrompt:
    system = EMAIL_SYSTEM + EMAIL_SYSTEM_BY_TYPE[req.email_type]
    tone = _or(req.tone, "professional")
    audience = _or(req.target_audience, "real estate clients")
    subject = _or(req.subject, "[Subject not provided]")

    if req.email_type == "broadcast":
        purpose = req.broadcast_purpose or ""
        purpose_display = BROADCAST_PURPOSES.get(purpose, purpose or "announcement")
        user = _compose(
            f"Write a {tone} broadcast email for real estate {purpose_display} targeting {audience}.",
            f"Email subject: {subject}",
            _broadcast_details(req),
            _signature_lines(req),
            "Format requirements:\n"
            "- Start with a compelling greeting and opening paragraph\n"
            "- Include 2-3 paragraphs of valuable content that resonates with real estate clients\n"
            "- Use bullet points where appropriate to highlight key information\n"
            "- End with a clear call to action\n"
            "- Include a professional signature with agent name, title, and brokerage information if provided\n"
            "- Ensure the email complies with real estate regulations by including appropriate disclaimers\n"
            "- Total length should be 250-350 words",
        )
        return ChatPrompt(system=system, user=user)

    if req.email_type == "follow-up":
        n = req.number_of_emails
        if req.follow_up_sequence_type == "other" and _present(req.custom_sequence_type):
            sequence = req.custom_sequence_type.strip()
        else:
            key = req.follow_up_sequence_type or "market-report"
            sequence = SEQUENCE_TYPES.get(key, key)
        if req.email_frequency == "custom" and _present(req.custom_email_frequency):
            timing = req.custom_email_frequency.strip()
        else:
            key = req.email_frequency or "3-5-7"
            timing = EMAIL_TIMINGS.get(key, key)

        user = _compose(
            f"Create a complete {tone} follow-up email sequence ({n} emails) for {sequence} targeting {audience}.",
            f"Subject line prefix: {subject}",
            f"Sequence timing: {timing}",
            f"Initial contact context: {_or(req.initial_contact_context, 'No initial context provided')}",
            f"Sequence goals: {_or(req.sequence_goals, 'No specific goals provided')}",
            f"Value proposition: {_or(req.value_proposition, 'No value proposition provided')}",
            _signature_lines(req, cta_label="Primary call to action"),
            "Format requirements:\n"
            f"- Create {n} separate follow-up emails that form a cohesive sequence\n"
            '- Each email should be clearly labeled as "EMAIL #1", "EMAIL #2", etc. at the beginning\n'
            "- Each email should have a unique subject line suggestion, based on the prefix provided\n"
            "- Start the first email with establishing context and value\n"
            "- Each subsequent email should build upon the previous ones\n"
            "- Increase the sense of urgency slightly with each email\n"
            "- Include natural transitions between emails that reference the timing\n"
            "- Each email should be 150-250 words\n"
            "- Include a professional signature for each email\n"
            "- Ensure each email complies with real estate regulations",
            f"IMPORTANT: Create all {n} emails in a single response, separated clearly.",
        )
        return ChatPrompt(system=system, user=user)

    transaction = _or(req.transaction_type, "general")
    specifics = {
        "welcome": ("Company/service information", req.company_info),
        "open-house": ("Open house details", req.open_house_details),
        "listing-alert": ("Property details", req.property_details),
        "appointment": ("Appointment details", req.appointment_details),
    }
    detail = ""
    if transaction in specifics:
        label, value = specifics[transaction]
        if _present(value):
            detail = f"{label}: {value.strip()}"

    user = _compose(
        f"Write a {tone} transactional email for a real estate {transaction} notification.",
        f"Email subject: {subject}",
        f"Target audience: {audience}",
        f"Recipient name: {req.user_name.strip()}" if _present(req.user_name) else "",
        detail,
        _signature_lines(req, company=False),
        "Format requirements:\n"
        "- Start with a personalized greeting (use [First Name] if no specific name provided)\n"
        "- Clearly communicate the key information in the first paragraph\n"
        "- Include any necessary details in a clean, scannable format\n"
        "- Suggest a relevant next step or action\n"
        "- Include a professional signature with agent name, title, and brokerage information if provided\n"
        "- Include any necessary real estate disclaimers or legal notices\n"
        "- Total length should be 150-250 words",
    )
    return ChatPrompt(system=system, user=user)
