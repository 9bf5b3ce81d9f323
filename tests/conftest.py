import os

# Keep the Agents SDK from exporting traces during tests.
os.environ.setdefault("OPENAI_AGENTS_DISABLE_TRACING", "true")
