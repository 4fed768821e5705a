"""ssac: source to QBE-style SSA IR compiler front end."""

from .api import (  # noqa: F401
    tokenize_source,
    parse_source,
    lower_source,
    compile_source,
    dump_tokens,
    dump_ast,
    ir_stats,
    compile_with_stats,
)
from .compile_types import CompileConfig  # noqa: F401
from .errors import (  # noqa: F401
    CompileError,
    LexicalError,
    ParseError,
    SemanticError,
    InternalError,
)
