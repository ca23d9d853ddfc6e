"""
agent - Conversational agent orchestration layer.

Contains tools, the prompt, and the executor that runs the LLM + tool
cycle. Depends on domain/ and application/. Never imports from
infrastructure/.
"""
