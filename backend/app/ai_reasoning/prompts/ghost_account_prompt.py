def build_ghost_account_prompt(account_age_years, connection_density, profile_completion) -> str:
    return f"""
Evaluate if this is a ghost/burner account based on metadata:
Account Age: {account_age_years} years
Connection Density: {connection_density}/10
Profile Completion: {profile_completion}%

Return STRICT JSON only in this format:
{{
  "trustScore": 1-100,
  "isSuspicious": true,
  "reasoning": "string"
}}
"""
