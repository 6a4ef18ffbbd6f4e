"""
Source Rendering for Diagnostics.

Diagnostics quote the analyzed code verbatim. Rendering is done against the
module the nodes were parsed from, so the module's formatting settings
(indentation, line endings) apply.
"""

import json

import libcst as cst

from ctxcheck.errors import RenderError


class SourceRenderer:
  """
  Renders nodes of one module back to source text.
  """

  def __init__(self, module: cst.Module):
    self.module = module

  def render(self, node: cst.CSTNode) -> str:
    """
    Renders a node to its source text.

    Args:
        node: Any node of the module.

    Returns:
        str: The source code of the node.

    Raises:
        RenderError: If code generation fails. This is never recovered from,
        since skipping the node would hide a violation.
    """
    try:
      return self.module.code_for_node(node)
    except Exception as e:
      raise RenderError(f"Failed to render {type(node).__name__}: {e}") from e


def quote(text: str) -> str:
  """Double-quotes text, escaping quotes, backslashes and control characters."""
  return json.dumps(text, ensure_ascii=False)
