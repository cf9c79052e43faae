"""
Workflow core for the Gemini Image GUI ComfyUI mode.
"""
