"""Generic prompts for the eight analysis steps.

Templates use ``string.Template`` placeholders: ``$domain``, ``$pages`` (the
rendered page contents) and, for recommendations, ``$analysis`` (prior step
output as JSON).  JSON examples in the text need no brace escaping.
"""

BRAND_SYNOPSIS = """\
Read the following public web pages for $domain. Summarize the brand promise in 120–150 words.

Important guidelines:
- Avoid guessing or making assumptions beyond what's stated
- Cite phrases or sections verbatim where possible
- Focus on what the brand explicitly communicates
- Note if information is implied vs explicitly stated

Web pages:
$pages

Return your analysis as a JSON object with this structure:
{
  "summary": "120-150 word brand synopsis",
  "confidence": "high/medium/low",
  "keyQuotes": ["quote 1", "quote 2", "quote 3"]
}"""

POSITIONING_PILLARS = """\
List 3–5 positioning pillars that the website for $domain substantiates.

For each pillar:
- Provide a clear name and description
- Include a short evidence quote from the site
- Reference which page the evidence comes from
- Rate your confidence in this pillar (high/medium/low)

Web pages:
$pages

Return your analysis as a JSON object with a "pillars" array:
{
  "pillars": [
    {
      "name": "Pillar name",
      "description": "Clear description of this positioning pillar",
      "evidence": "Direct quote from the website",
      "sourceUrl": "URL where evidence was found",
      "confidence": "high/medium/low"
    }
  ]
}"""

TONE_OF_VOICE = """\
Analyze the tone of voice for $domain's website.

Provide:
- Three adjectives that describe the voice
- One example sentence that exemplifies this voice
- Reading level assessment (if determinable)
- Key linguistic patterns or style choices

Web pages:
$pages

Return your analysis as a JSON object:
{
  "adjectives": ["adjective1", "adjective2", "adjective3"],
  "exampleSentence": "An actual sentence from the site that exemplifies the voice",
  "readingLevel": "description of reading level",
  "patterns": ["pattern 1", "pattern 2"]
}"""

BUYER_SEGMENTS = """\
Name 2–3 likely buyer segments for $domain based on the site's own words.

CRITICAL: Avoid protected attributes (race, religion, national origin, familial status, \
disability, etc.) per Fair Housing guidelines.

Focus on:
- Lifestyle preferences mentioned on the site
- Values and priorities the brand speaks to
- Activities and amenities that signal target segments
- Price points and product types offered

Web pages:
$pages

Return your analysis as a JSON object with a "segments" array:
{
  "segments": [
    {
      "name": "Segment name (avoid protected classes)",
      "description": "Description based on lifestyle, values, or preferences",
      "reasoning": "Why this segment is indicated by the site content",
      "evidence": "Specific quotes or references from the site"
    }
  ]
}"""

AMENITIES = """\
Identify amenity and lifestyle claims for $domain.

Categorize each as:
- "stated": Explicitly mentioned amenities and features
- "implied": Lifestyle benefits suggested but not directly stated

Web pages:
$pages

Return your analysis as a JSON object with an "amenities" array:
{
  "amenities": [
    {
      "name": "Amenity or lifestyle element",
      "type": "stated or implied",
      "description": "What is claimed or suggested",
      "evidence": "Quote or reference from the site"
    }
  ]
}"""

TRUST_SIGNALS = """\
Identify trust signals present on $domain's website.

Look for:
- Testimonials or reviews
- Certifications and accreditations
- Awards and recognition
- Data points and statistics
- Press mentions
- Warranties or guarantees
- Third-party validations

Web pages:
$pages

Return your analysis as a JSON object with a "signals" array:
{
  "signals": [
    {
      "type": "testimonial|certification|award|data|press|warranty",
      "description": "What the trust signal communicates",
      "source": "Where on the site this appears",
      "strength": "high|medium|low confidence in this signal"
    }
  ]
}"""

MESSAGING = """\
Analyze the messaging quality for $domain across four dimensions:

1. **Clarity**: Is the language clear and accessible? Is there jargon? What's the reading level?

2. **Specificity**: Are there concrete numbers, details, and proof points? Or mostly platitudes?

3. **Differentiation**: What makes this unique vs generic language in its category?

4. **Trust**: What evidence, testimonials, data, or proof builds credibility?

Web pages:
$pages

For each dimension, score as Low/Medium/High and provide:
- Specific evidence from the text
- Concrete examples
- 2-3 recommendations for improvement

Return your analysis as a JSON object:
{
  "clarity": {
    "level": "low|medium|high",
    "score": 0-100,
    "rationale": "Why this score",
    "evidence": ["example 1", "example 2"],
    "recommendations": ["rec 1", "rec 2"]
  },
  "specificity": { "level": "...", "score": 0, "rationale": "...", "evidence": [], "recommendations": [] },
  "differentiation": { "level": "...", "score": 0, "rationale": "...", "evidence": [], "recommendations": [] },
  "trust": { "level": "...", "score": 0, "rationale": "...", "evidence": [], "recommendations": [] }
}"""

RECOMMENDATIONS = """\
Based on your analysis of $domain, provide 5 concrete recommendations to improve brand \
clarity, specificity, differentiation, and trust.

Current analysis summary:
$analysis

For each recommendation:
- Provide a clear, actionable title
- Explain what to do and why
- Categorize as: copy, content, proof, structure, or faq
- Estimate impact (high/medium/low) and effort (S/M/L)
- Include before/after examples where applicable

Focus on:
- Clarity: removing jargon, simplifying language
- Specificity: adding numbers, concrete details, proof points
- Differentiation: unique positioning vs generic claims
- Trust: evidence, social proof, transparency

Return your recommendations as a JSON object with a "recommendations" array:
{
  "recommendations": [
    {
      "title": "Clear, actionable recommendation title",
      "description": "Detailed explanation of what to do and why",
      "impact": "high|medium|low",
      "effort": "S|M|L",
      "category": "copy|content|proof|structure|faq",
      "before": "Current text example (if applicable)",
      "after": "Suggested text (if applicable)",
      "evidence": "Why this matters based on analysis"
    }
  ]
}"""
