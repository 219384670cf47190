def build_calibration_prompt(job_context: str, ideal_candidate: str) -> str:
    return f"""
You are an expert technical recruiter.

Job context:
{job_context}

Ideal candidate:
{ideal_candidate}

Generate 3 specific, high-stakes screening questions (IRT style) and suggest
how much each scoring dimension should weigh for this role.

Return STRICT JSON only in this format:
{{
  "questions": [
    {{"text": "string", "category": "string", "difficulty": "string"}}
  ],
  "weights": {{
    "technicalAccuracy": 0.0,
    "coherence": 0.0,
    "authenticity": 0.0,
    "seniorityAlignment": 0.0
  }},
  "rationale": "brief explanation of why these questions were chosen"
}}
"""
