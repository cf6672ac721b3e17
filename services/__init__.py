from .insight import DEFAULT_VIEWER, InsightPanel, OpenAIInsightGenerator, UNAVAILABLE_TEXT, FAILED_TEXT
