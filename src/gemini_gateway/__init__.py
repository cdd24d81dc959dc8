"""
Gemini Gateway package.

Provides:
- FastAPI gateway forwarding chat, text, image, document and audio prompts to Gemini
- Shape-tolerant extraction of text from Gemini responses
- Static browser client served at the root path
"""
