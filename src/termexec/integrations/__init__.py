"""Framework integrations for termexec.

Import the submodule for the framework you use:
``termexec.integrations.langchain`` or ``termexec.integrations.pydantic_ai``.
"""
