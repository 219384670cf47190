def build_feedback_prompt(transcript: str, scores: dict) -> str:
    """
    Built once per session, after the follow-up answer.
    """

    return f"""
Generate a brutal but constructive executive feedback report.

Focus on "Recovery Latency" (how they handled pressure) and "Cognitive Load".
Tone: professional, direct, no fluff.
- Do NOT mention AI, models, or internal metrics
- Do NOT repeat the raw transcript

Transcript:
{transcript}

Scores:
{scores}

Return STRICT JSON only in this format:
{{
  "strengths": ["string"],
  "growthAreas": ["string"],
  "careerTips": "strategic advice for executive presence"
}}
"""
