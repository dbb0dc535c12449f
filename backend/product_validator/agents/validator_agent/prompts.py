"""Prompt templates for the product-validator proxy endpoints.

One builder per endpoint: deep search (/validate), outreach, contacts and
inbound content. JSON-carrying inputs arrive already rendered as text.
"""

from __future__ import annotations

from typing import Optional


# ── /validate ────────────────────────────────────────────────────────────

def build_deep_search_prompt(
    product_idea: str,
    context: Optional[str] = None,
    resources_json: Optional[str] = None,
) -> str:
    context_line = f"CONTEXT: {context}" if context else ""
    resources_line = f"ADDITIONAL RESOURCES: {resources_json}" if resources_json else ""

    return f"""
You are an expert market researcher and product validation specialist. Your task is to analyze this product idea and generate realistic market research data based on your knowledge of current market trends and consumer behavior.

PRODUCT IDEA: {product_idea}
{context_line}
{resources_line}

Based on your understanding of the market, generate realistic findings for this product idea. Focus on:

1. **RELEVANT DISCUSSIONS**: Generate realistic discussions where people are talking about problems this product could solve
2. **POTENTIAL CUSTOMERS**: Identify realistic customer segments who would benefit from this product
3. **MARKET INSIGHTS**: Analyze demand, competition, and opportunities based on current market trends

Consider platforms like:
- Reddit (relevant subreddits for the product category)
- LinkedIn discussions and posts
- Twitter conversations
- Quora questions
- Product Hunt discussions
- Niche communities and forums (if applicable)

For each finding, provide realistic but fictional data that represents what you might find in real market research.

Return your findings in this JSON format:
{{
  "discussions": [
    {{
      "platform": "reddit",
      "title": "Realistic post title related to the product idea",
      "url": "https://reddit.com/r/relevantsubreddit/example",
      "author": "realistic_username",
      "authorContext": "Realistic job/context",
      "content": "Realistic post content describing a problem this product could solve...",
      "date": "2024-01-15",
      "relevance": 90,
      "problem": "Specific problem they're facing",
      "solution": "How your product could help them"
    }}
  ],
  "people": [
    {{
      "name": "Realistic Name",
      "platform": "linkedin",
      "context": "Realistic job title and company",
      "problem": "Specific problem they're struggling with",
      "originalPost": "Realistic post content...",
      "url": "https://linkedin.com/example",
      "engagement": "Realistic engagement metrics"
    }}
  ],
  "insights": {{
    "marketDemand": "Realistic assessment of market demand for this specific product",
    "commonPainPoints": ["Specific pain points related to this product category"],
    "bestChannels": ["Most effective channels for reaching this target audience"],
    "nextSteps": ["Realistic next steps for validating this product"]
  }}
}}

Make sure all the data is specifically relevant to the product idea: "{product_idea}". Don't provide generic responses - tailor everything to this specific product concept.

Generate at least 3-5 relevant discussions and 2-3 potential customers. Focus on quality and relevance over quantity.
"""


# ── /outreach ────────────────────────────────────────────────────────────

def build_outreach_prompt(product_idea: str, search_results_json: str, target_person_json: str) -> str:
    return f"""
You are an expert in customer outreach and sales messaging. Your task is to create a highly personalized outreach message for a potential customer.

PRODUCT IDEA: {product_idea}

TARGET PERSON JSON:
{target_person_json}

SEARCH CONTEXT:
{search_results_json}

Create a personalized outreach message that:
1. **Shows understanding**: reference their specific problem and situation
2. **Provides value**: explain how your product could help them
3. **Is platform-appropriate**: use the right tone
4. **Has clear CTA**: tell them exactly what you want them to do next
5. **Is concise**: keep it under 150 words

Return only the message text, no additional formatting or explanations.
"""


# ── /contacts ────────────────────────────────────────────────────────────

def build_contacts_prompt(target_person_json: str) -> str:
    return f"""
You are an expert in finding professional contact information and conducting web research.

PERSON TO FIND (JSON):
{target_person_json}

Please search for their contact information, including:
1. Professional email address
2. LinkedIn profile URL
3. Twitter handle (if relevant)
4. Company website
5. Any other professional contact methods

Return the results in this JSON format:
{{
  "email": "person@company.com",
  "linkedin": "https://linkedin.com/in/username",
  "twitter": "@username",
  "company": "Company Name",
  "website": "https://company.com",
  "other": "Any other relevant contact info"
}}

If you can't find certain information, omit those fields. Focus on finding at least their LinkedIn profile and professional email if possible.
"""


# ── /inbound-content ─────────────────────────────────────────────────────

_INBOUND_PIECES = [
    ("LinkedIn Post", "LinkedIn", "Engaging headline", "Full post content with proper formatting..."),
    ("Twitter Thread", "Twitter", "Thread headline", "Thread content with numbered tweets..."),
    ("Reddit Post", "Reddit", "Post title", "Post content..."),
    ("Newsletter Content", "Email", "Newsletter subject line", "Newsletter content..."),
    ("Blog Post Idea", "Blog", "Blog post title", "Blog post outline and key points..."),
]


def _inbound_example() -> str:
    items = []
    for kind, platform, title, content in _INBOUND_PIECES:
        items.append(
            "    {\n"
            f'      "type": "{kind}",\n'
            f'      "platform": "{platform}",\n'
            f'      "title": "{title}",\n'
            f'      "content": "{content}",\n'
            '      "cta": "Clear call-to-action",\n'
            '      "targetAudience": "Specific ICP this targets",\n'
            '      "painPoint": "Pain point this addresses",\n'
            '      "estimatedEngagement": "High/Medium/Low"\n'
            "    }"
        )
    return "{\n  \"inboundContent\": [\n" + ",\n".join(items) + "\n  ]\n}"


def build_inbound_content_prompt(product_idea: str, insights_json: str, icps_json: str) -> str:
    return f"""
You are an expert content strategist and inbound marketing specialist. Your task is to create engaging inbound content that will attract and engage the target audience for this product idea.

PRODUCT IDEA: {product_idea}

MARKET INSIGHTS:
{insights_json or "Not provided"}

IDENTIFIED ICPS:
{icps_json or "Not provided"}

Create diverse inbound content pieces that will:
1. **Attract the right audience** - Use the insights to target the identified ICPs
2. **Address pain points** - Create content that speaks to their specific challenges
3. **Provide value** - Offer insights, tips, or solutions they can use immediately
4. **Drive engagement** - Include clear calls-to-action that encourage interaction
5. **Build authority** - Position the product as a solution to their problems

Generate content for these platforms:
- LinkedIn posts (professional audience)
- Twitter/X posts (concise, engaging)
- Reddit posts (community-focused)
- Newsletter content (educational)
- Blog post ideas (long-form content)

For each piece, include:
- Platform-specific formatting
- Engaging hook/headline
- Valuable content that addresses pain points
- Clear call-to-action
- Estimated engagement potential

Return your content in this JSON format:
{_inbound_example()}

Make sure all content is specifically tailored to the product idea: "{product_idea}". Focus on creating content that will genuinely help the target audience and position your product as the solution they need.
"""
