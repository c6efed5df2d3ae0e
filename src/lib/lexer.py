"""
Custom Pygments lexer for scenedown scenario notation

Provides syntax highlighting for scenario source lines, used by the CLI to
show the offending line when a compile fails.

Token types:
- Keyword.Pseudo: %in% indent prefixes
- Name.Label: ;;label definitions
- Comment: # comments
- Name.Variable / Name.Class: ;alias:Display Name
- Keyword / Name.Attribute: $instruction arguments
- Name.Entity: Speaker before a dialogue bracket
- String: Dialogue and narrator text
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Comment,
    Other,
)

# Every construct starts a line, possibly after %in% prefixes
_START = r'(?:^|(?<=%in%))'


class ScenedownLexer(RegexLexer):
    """
    Lexer for scenedown scenario notation

    Example:
        %in%A「Hello」

    Tokens:
        %in% → Keyword.Pseudo
        A → Name.Entity
        「 → Punctuation
        Hello → String
        」 → Punctuation
    """

    name = 'Scenedown'
    aliases = ['scenedown', 'scn']
    filenames = ['*.scn']

    tokens = {
        'root': [
            # Indent boost prefixes
            (r'^(?:%in%)+', Keyword.Pseudo),

            # Label definitions
            (_START + r'(;;)(.*?)$', bygroups(Punctuation, Name.Label)),

            # Comments
            (_START + r'#.*?$', Comment),

            # Narrator text
            (_START + r'(「)(.*)(」)', bygroups(Punctuation, String, Punctuation)),

            # Character dialogue
            (_START + r'([^「\n]+)(「)(.*)(」)',
             bygroups(Name.Entity, Punctuation, String, Punctuation)),

            # Alias definitions
            (_START + r'(;)([^:\n]*)(:)(.*?)$',
             bygroups(Punctuation, Name.Variable, Punctuation, Name.Class)),

            # Target-language passthrough
            (_START + r'(:)(.*?)$', bygroups(Punctuation, Other)),

            # Extension instructions
            (_START + r'(\$)(\w*)(.*?)$', bygroups(Punctuation, Keyword, Name.Attribute)),

            (r'\n', Text),
            (r'.', Text),
        ],
    }


def get_lexer() -> ScenedownLexer:
    """
    Get the ScenedownLexer instance

    Returns:
        ScenedownLexer instance ready for use with Pygments
    """
    return ScenedownLexer()


def source_highlight(source: str) -> str:
    """
    Highlight scenario source for a terminal

    Args:
        source: One or more scenario lines

    Returns:
        Text with ANSI color escapes
    """
    return highlight(source, get_lexer(), TerminalFormatter())
