def build_evaluation_prompt(question: str, transcript: str, seniority: str) -> str:
    return f"""
Act as a Senior Executive Talent Evaluator.
Objective: conduct a forensic analysis of this candidate's response for a {seniority} role.

Evaluation criteria:
1. Structural Integrity: did they maintain a logical framework (STAR/PREP) or ramble?
2. Signal-to-Noise Ratio: substantive data vs. fluff or corporate speak.
3. Assertiveness Index: direct assertions vs. hedges ("I think", "maybe").
4. Technical Accuracy: rigorous correctness.
5. Cognitive Load Handling: did they handle complexity without losing rhetorical flow?

Tone: ice-cold, objective and skeptical.

Question:
{question}

Transcript:
{transcript}

Return STRICT JSON only in this format (all scores 1-100):
{{
  "technicalAccuracy": 0,
  "structuralIntegrity": 0,
  "assertivenessIndex": 0,
  "signalToNoiseRatio": 0,
  "seniorityAlignment": 0,
  "coherence": 0,
  "authenticity": 0,
  "summary": "string",
  "keyTakeaways": ["string"],
  "isAIGenerated": false,
  "recommendation": "HIRE | REJECT | MAYBE",
  "recommendationReason": "one sentence executive summary",
  "speechMetrics": {{
    "wpm": 0,
    "fillerWordCount": 0,
    "fillerWords": ["string"],
    "tonality": "Monotone | Expressive | Aggressive | Nervous | Professional",
    "clarityScore": 0
  }}
}}
"""
