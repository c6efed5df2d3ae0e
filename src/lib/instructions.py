"""
Extension instruction implementations for scenedown

Each `$command args...` line is dispatched to a handler that mutates the
engine's state (mode, decorations, substitutions, skip depth) and emits the
line's output. Uses InstructionSpec for metadata and argument validation.
"""

from typing import Dict, List, Optional, Any

from ..models.instructions import (
    InstructionSpec,
    InstructionCategory,
    Mode,
    decoration_lookup,
)
from ..models.engine import InstructionCall
from .errors import (
    ArgumentCountError,
    UnknownExtensionError,
    UnknownDecorationError,
    IncludeUnavailableError,
    IncludeArgumentError,
    IncludeNotFoundError,
    IncludeReadError,
)
from .log import LOG

# Opening token of a python block in the target script
PYTHON_BLOCK_OPENER = "python:"


class InstructionRegistry:
    """
    Registry of instruction specifications and handlers

    Maps instruction names to InstructionSpec objects containing metadata
    and execution handlers.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in instructions"""
        self.specs: Dict[str, InstructionSpec] = {}
        self.modeInstructions_register()
        self.includeInstructions_register()
        self.decorationInstructions_register()
        self.macroInstructions_register()
        self.conditionalInstructions_register()

    def register(self, spec: InstructionSpec) -> None:
        """Register an instruction specification"""
        self.specs[spec.name] = spec

    def spec_get(self, name: str) -> Optional[InstructionSpec]:
        """Get full instruction specification by name"""
        return self.specs.get(name)

    def instructions_listByCategory(self, category: InstructionCategory) -> List[InstructionSpec]:
        """Get all instructions in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    @staticmethod
    def call_parse(text: str, line_number: int) -> InstructionCall:
        """
        Split an instruction line into command and arguments

        Args:
            text: Line content after the leading `$`
            line_number: Current output line number

        Example:
            >>> InstructionRegistry.call_parse("define HELLO Konnichiwa", 3)
            InstructionCall(command='define', args=['HELLO', 'Konnichiwa'], line_number=3)
        """
        tokens = text.split()
        if not tokens:
            return InstructionCall(command="", args=[], line_number=line_number)
        return InstructionCall(command=tokens[0], args=tokens[1:], line_number=line_number)

    def dispatch(self, call: InstructionCall, engine: Any) -> None:
        """
        Validate and execute an instruction against an engine

        Raises:
            UnknownExtensionError: If the command is not registered
            ArgumentCountError: If the argument count does not match the spec
        """
        spec = self.spec_get(call.command)
        if spec is None:
            raise UnknownExtensionError(
                call.line_number, f"Unknown extension instruction '${call.command}'."
            )

        if not spec.arity_accepts(len(call.args)):
            raise ArgumentCountError(
                call.line_number,
                f"'${spec.name}' expects {spec.arity_describe()} argument(s), "
                f"got {len(call.args)}.",
            )

        LOG(f"Line {call.line_number}: ${call.command} {' '.join(call.args)}".rstrip(), level=3)
        spec.handler(call, engine)

    def modeInstructions_register(self) -> None:
        """Register instructions that switch the scanning mode"""

        def python_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $python - top-level python block, body one level deep"""
            engine.line_add(PYTHON_BLOCK_OPENER, 0)
            engine.mode_enter(Mode.INDENTED)

        def renpy_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $renpy - host script passed through without indentation"""
            engine.line_add()
            engine.mode_enter(Mode.VERBATIM)

        def inpy_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $inpy - python block inside a label, body two levels deep"""
            engine.line_add(PYTHON_BLOCK_OPENER, 1)
            engine.mode_enter(Mode.NESTED)

        self.register(InstructionSpec(
            name='python',
            category=InstructionCategory.MODE,
            description='Open a top-level python: block until $endpy',
            handler=python_handler,
            examples=['$python\nflag = True\n$endpy'],
        ))

        self.register(InstructionSpec(
            name='renpy',
            category=InstructionCategory.MODE,
            description='Pass Ren\'Py lines through verbatim until $endrenpy',
            handler=renpy_handler,
            examples=['$renpy\nscene bg room\n$endrenpy'],
        ))

        self.register(InstructionSpec(
            name='inpy',
            category=InstructionCategory.MODE,
            description='Open a python: block nested in a label until $endinpy',
            handler=inpy_handler,
            examples=['$inpy\ncount += 1\n$endinpy'],
        ))

    def includeInstructions_register(self) -> None:
        """Register the file inclusion instruction"""

        def include_handler(call: InstructionCall, engine: Any) -> None:
            """
            Handle $include - compile another file and splice its output

            The included file is compiled by a fresh engine of the same type;
            aliases, decorations, substitutions and skip depth are not shared.
            """
            if engine.file_access is None:
                raise IncludeUnavailableError(
                    call.line_number, "$include is not available without file access."
                )

            if len(call.args) != 1:
                raise IncludeArgumentError(
                    call.line_number,
                    f"'$include' expects exactly 1 path, got {len(call.args)}.",
                )

            include_path = call.args[0]
            if not engine.file_access.exists(include_path):
                raise IncludeNotFoundError(
                    call.line_number, f"File '{include_path}' does not exist."
                )

            try:
                include_text = engine.file_access.read_all(include_path)
            except (OSError, UnicodeDecodeError) as e:
                raise IncludeReadError(
                    call.line_number, f"File '{include_path}' could not be read: {e}"
                ) from e
            LOG(f"Compiling include {include_path}", level=2)

            included = type(engine)(
                include_text,
                file_access=engine.file_access,
                settings=engine.settings,
            )
            compiled = included.compile()
            engine.warnings.extend(included.warnings)
            engine.line_add(compiled, 0)

        self.register(InstructionSpec(
            name='include',
            category=InstructionCategory.INCLUDE,
            description='Compile a scenario file and insert its output',
            handler=include_handler,
            min_args=0,
            max_args=None,  # validated by the handler after the capability check
            examples=['$include chapter1.scn'],
        ))

    def decorationInstructions_register(self) -> None:
        """Register text decoration instructions"""

        def style_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $style - push decorations in argument order"""
            resolved = []
            for name in call.args:
                decoration = decoration_lookup(name)
                if decoration is None:
                    raise UnknownDecorationError(
                        call.line_number, f"Unknown decoration '{name}'."
                    )
                resolved.append(decoration)
            engine.decorations.extend(resolved)
            engine.line_add()

        def endstyle_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $endstyle - drop every active decoration"""
            engine.decorations.clear()
            engine.line_add()

        self.register(InstructionSpec(
            name='style',
            category=InstructionCategory.DECORATION,
            description='Wrap following dialogue in bold/italic/strikethrough/underline tags',
            handler=style_handler,
            min_args=1,
            max_args=None,
            examples=['$style b i', '$style underline'],
        ))

        self.register(InstructionSpec(
            name='endstyle',
            category=InstructionCategory.DECORATION,
            description='Clear all active decorations',
            handler=endstyle_handler,
            examples=['$endstyle'],
        ))

    def macroInstructions_register(self) -> None:
        """Register text substitution instructions"""

        def define_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $define - literal token replacement in dialogue text"""
            token, replacement = call.args
            engine.substitutions[token] = replacement
            engine.line_add()

        self.register(InstructionSpec(
            name='define',
            category=InstructionCategory.MACRO,
            description='Replace a literal token in dialogue text',
            handler=define_handler,
            min_args=2,
            max_args=2,
            examples=['$define HERO Taro'],
        ))

    def conditionalInstructions_register(self) -> None:
        """Register conditional compilation instructions"""

        def ifdef_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $ifdef - skip to $endif unless the token is defined"""
            if call.args[0] not in engine.substitutions:
                engine.skip_depth += 1
            engine.line_add()

        def ifndef_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $ifndef - skip to $endif if the token is defined"""
            if call.args[0] in engine.substitutions:
                engine.skip_depth += 1
            engine.line_add()

        def endif_handler(call: InstructionCall, engine: Any) -> None:
            """Handle $endif reached outside a skipped block - no effect"""
            engine.line_add()

        self.register(InstructionSpec(
            name='ifdef',
            category=InstructionCategory.CONDITIONAL,
            description='Compile the block only if the token was $define-d',
            handler=ifdef_handler,
            min_args=1,
            max_args=1,
            examples=['$ifdef DEBUG\n「debug line。」\n$endif'],
        ))

        self.register(InstructionSpec(
            name='ifndef',
            category=InstructionCategory.CONDITIONAL,
            description='Compile the block only if the token was not $define-d',
            handler=ifndef_handler,
            min_args=1,
            max_args=1,
            examples=['$ifndef DEBUG\n「release line。」\n$endif'],
        ))

        self.register(InstructionSpec(
            name='endif',
            category=InstructionCategory.CONDITIONAL,
            description='Close a conditional block',
            handler=endif_handler,
            examples=['$endif'],
        ))
