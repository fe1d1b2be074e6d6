from chainkit.tools.base import FunctionTool, Tool, tool
from chainkit.tools.builtin import BUILTIN_TOOLS, current_datetime, pdf_to_text

__all__ = ["BUILTIN_TOOLS", "FunctionTool", "Tool", "current_datetime", "pdf_to_text", "tool"]
