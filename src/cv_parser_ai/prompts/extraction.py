"""Extraction prompt templates.

The field manifest is either rendered from the schema or, for the low and
moderate levels, one of the hand-written field lists below. Every prompt ends
with the JSON-only directive the response parser relies on.
"""

CV_EXTRACTION_PROMPT = """You are a professional CV/Resume parser. Extract the following information from the provided CV text and return it as a valid JSON object.

REQUIRED FIELDS TO EXTRACT:
{field_manifest}

IMPORTANT INSTRUCTIONS:
1. Extract only the information that is explicitly present in the CV
2. Return valid JSON format only
3. Use null for missing optional fields
4. For dates, use YYYY-MM-DD format or YYYY-MM if day is not specified
5. For arrays, extract all relevant items
6. For skills, separate technical skills from soft skills
7. For experience, include all job positions with as much detail as available
8. For education, include all educational qualifications
9. Do not include any explanatory text, only the JSON object
10. For the SUMMARY field: Look for professional summary, profile, or objective text which may appear:
    - Under headings like "SUMMARY", "PROFILE", "OBJECTIVE", "ABOUT", "PROFESSIONAL SUMMARY"
    - As a paragraph immediately after the name/contact info and before the first major section
    - As descriptive text about the person's professional background, skills overview, or career objectives
    - Even if there's no explicit heading, extract any introductory professional description

CV TEXT TO PARSE:
{cv_text}

Return only the JSON object:"""

# Low level: contact details and main skills only
LOW_LEVEL_FIELDS = """- personal: {fullName, firstName, lastName, email, phone}
- skills: {technical: []}"""

# Moderate level: the four core sections
MODERATE_LEVEL_FIELDS = """- personal: {fullName, firstName, lastName, email, phone, address, linkedIn}
- experience: [{jobTitle, company, startDate, endDate, location, description}]
- education: [{institution, degree, fieldOfStudy, startDate, endDate}]
- skills: {technical: [], soft: []}"""

CANNED_LEVEL_FIELDS = {
    "low": LOW_LEVEL_FIELDS,
    "moderate": MODERATE_LEVEL_FIELDS,
}

# Chat-style providers send this as the system message
SYSTEM_INSTRUCTION = "Extract CV data and return valid JSON only."
