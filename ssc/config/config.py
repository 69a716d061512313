"""
Static configuration data for the ShapeScript compiler.
This includes reserved words, builtin names, evaluation limits and
the friendly token names used when rendering syntax errors.
"""

# Maximum number of nested shape calls before evaluation is aborted.
STACK_LIMIT = 256

RESERVED_WORDS = {"shape"}

MAIN_SHAPE = "main"

# The only primitive that is not a shape: injects its string argument verbatim.
SVG_BUILTIN = "svg"
SVG_VALUE_ARG = "value"

SVG_DOCUMENT_TEMPLATE = '<svg width="100%" height="100%" xmlns="http://www.w3.org/2000/svg">{body}</svg>'

# Package data file holding the builtin shape library, relative to `ssc.evaluator`.
STDLIB_PACKAGE = "ssc.evaluator"
STDLIB_RESOURCE = "stdlib.shape"

TOKEN_FRIENDLY_NAMES = {
    "LPAREN": "an opening parenthesis '('",
    "RPAREN": "a closing parenthesis ')'",
    "LCURLY": "an opening brace '{'",
    "RCURLY": "a closing brace '}'",
    "TIMES": "a multiplication sign '*'",
    "DIVIDE": "a division sign '/'",
    "PLUS": "a plus sign '+'",
    "MINUS": "a minus sign '-'",
    "EQUALS": "an equals sign '='",
    "COMPARE": "a comparison '=='",
    "COLON": "a colon ':'",
    "COMMA": "a comma ','",
    "NUMBER": "a number",
    "IDENTIFIER": "a name",
    "STRING": "a string in double quotes",
}
