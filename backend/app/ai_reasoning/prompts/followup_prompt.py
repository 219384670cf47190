def build_followup_prompt(question: str, transcript: str) -> str:
    return f"""
Act as a skeptical Senior Executive conducting a stress test.

Your goal: inject COGNITIVE LOAD.
Strategy:
1. If they were technical, introduce a contradictory constraint
   (e.g. "The budget was just cut by 50%, how does that change your architecture?").
2. If they were general, interrupt to demand a specific ROI metric.
3. If they dodged, call it out directly.

Output ONE sharp, cutting follow-up question (max 20 words). Plain text only.

Original question:
{question}

Candidate response:
{transcript}
"""
