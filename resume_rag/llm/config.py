"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings, get_settings


def get_llm(settings: Settings | None = None, max_output_tokens: int | None = None) -> BaseChatModel:
    """Create and return the configured chat model.

    Sampling parameters (temperature, top-p, top-k) come from settings and
    are fixed for the lifetime of the returned model.
    Default: Gemini via langchain-google-genai.
    """
    settings = settings or get_settings()
    provider = settings.resume_rag_llm_provider.lower()
    max_tokens = max_output_tokens or settings.resume_rag_max_output_tokens

    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs = {}
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        return ChatGoogleGenerativeAI(
            model=settings.resume_rag_llm_model,
            temperature=settings.resume_rag_temperature,
            top_p=settings.resume_rag_top_p,
            top_k=settings.resume_rag_top_k,
            max_output_tokens=max_tokens,
            **kwargs,
        )
    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.resume_rag_llm_model,
            temperature=settings.resume_rag_temperature,
            top_k=settings.resume_rag_top_k,
            max_tokens=max_tokens,
            api_key=settings.anthropic_api_key,
        )
    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'google', 'anthropic'"
        )
