# -*- coding: utf-8 -*-
"""NutriPal AI backend: Gemini-powered nutrition flows with API key rotation."""
