"""Provider adapters — one text-generation pipeline per backend.

Modules:
    errors              Pipeline error taxonomy and provider error-message lookup
    base                Shared pipeline, result types and provider identifiers
    anthropic_adapter   Adapter-A: Claude, placeholder images only
    openai_adapter      Adapter-B: GPT-4o, DALL-E 3 images via the local proxy
    gemini_adapter      Adapter-C: Gemini REST, Stability AI images via the local proxy

Pipeline:
    credentials → text call → brief extraction → image resolution → PipelineResult
"""
