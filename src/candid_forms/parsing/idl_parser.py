"""Parser for whole Candid interfaces (type definitions plus the service)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from candid_forms.parsing.idl_lexer import IdlLexer
from candid_forms.types import MethodInfo, MethodKind

logger = logging.getLogger(__name__)


@dataclass
class TypeNode:
    """Canonical text of a parsed datatype.

    ``func`` and ``methods`` keep the structure of function and service types
    so that aliases of them can be used in a service body.
    """

    text: str
    func: FuncSignature | None = None
    methods: list[MethodInfo | MethodRef] | None = None


@dataclass
class FuncSignature:
    """Argument and result lists of a function type."""

    args: list[tuple[str | None, str]]
    rets: list[tuple[str | None, str]]
    modes: list[str] = field(default_factory=list)

    @property
    def kind(self) -> MethodKind:
        if "composite_query" in self.modes:
            return MethodKind.COMPOSITE_QUERY
        if "query" in self.modes:
            return MethodKind.QUERY
        if "oneway" in self.modes:
            return MethodKind.ONEWAY
        return MethodKind.UPDATE

    def render(self) -> str:
        args = ", ".join(_render_arg(a) for a in self.args)
        rets = ", ".join(_render_arg(r) for r in self.rets)
        text = f"({args}) -> ({rets})"
        if self.modes:
            text += " " + " ".join(self.modes)
        return text


@dataclass
class ParsedInterface:
    """Result of parsing a ``.did`` source."""

    methods: list[MethodInfo]
    aliases: dict[str, str]
    init_args: list[str] = field(default_factory=list)

    def method(self, name: str) -> MethodInfo | None:
        for m in self.methods:
            if m.name == name:
                return m
        return None


@dataclass
class MethodRef:
    """A service method declared through a function type alias."""

    label: str
    type_name: str
    lexpos: int


def _render_arg(arg: tuple[str | None, str]) -> str:
    name, ty = arg
    return ty if name is None else f"{name} : {ty}"


def _render_fields(keyword: str, fields: list[tuple[str | None, str]]) -> str:
    if not fields:
        return f"{keyword} {{}}"
    return f"{keyword} {{ " + "; ".join(_render_arg(f) for f in fields) + " }"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class InterfaceParser:
    """Parser for Candid interface definitions."""

    tokens = IdlLexer.tokens
    start = "interface"

    def __init__(self) -> None:
        self.lexer = IdlLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._definitions: list[tuple[str, TypeNode, int]] = []
        self._types: dict[str, TypeNode] = {}

    # -- Top level -----------------------------------------------------------

    def p_interface(self, p: yacc.YaccProduction) -> None:
        """interface : definitions actor_opt"""
        p[0] = p[2]

    def p_definitions_multiple(self, p: yacc.YaccProduction) -> None:
        """definitions : definitions definition"""
        p[0] = None

    def p_definitions_empty(self, p: yacc.YaccProduction) -> None:
        """definitions : empty"""
        p[0] = None

    def p_definition_type(self, p: yacc.YaccProduction) -> None:
        """definition : TYPE IDENTIFIER EQUALS datatype SEMI"""
        self._definitions.append((p[2], p[4], p.lexpos(2)))

    def p_definition_import(self, p: yacc.YaccProduction) -> None:
        """definition : IMPORT TEXT SEMI"""
        logger.debug("Ignoring import of %s", p[2])

    def p_actor_opt(self, p: yacc.YaccProduction) -> None:
        """actor_opt : actor
                     | actor SEMI"""
        p[0] = p[1]

    def p_actor_opt_empty(self, p: yacc.YaccProduction) -> None:
        """actor_opt : empty"""
        p[0] = None

    def p_actor(self, p: yacc.YaccProduction) -> None:
        """actor : SERVICE COLON actor_type
                 | SERVICE IDENTIFIER COLON actor_type"""
        p[0] = p[len(p) - 1]

    def p_actor_type_body(self, p: yacc.YaccProduction) -> None:
        """actor_type : service_body
                      | IDENTIFIER"""
        p[0] = ([], p[1])

    def p_actor_type_init(self, p: yacc.YaccProduction) -> None:
        """actor_type : LPAREN args RPAREN ARROW service_body
                      | LPAREN args RPAREN ARROW IDENTIFIER"""
        p[0] = (p[2], p[5])

    def p_service_body(self, p: yacc.YaccProduction) -> None:
        """service_body : LBRACE methods RBRACE"""
        p[0] = p[2]

    def p_methods_multiple(self, p: yacc.YaccProduction) -> None:
        """methods : methods method"""
        p[0] = p[1] + [p[2]]

    def p_methods_empty(self, p: yacc.YaccProduction) -> None:
        """methods : empty"""
        p[0] = []

    def p_method_signature(self, p: yacc.YaccProduction) -> None:
        """method : label COLON func_sig SEMI"""
        p[0] = self._method(p[1], p[3])

    def p_method_alias(self, p: yacc.YaccProduction) -> None:
        """method : label COLON IDENTIFIER SEMI"""
        # Resolved once all definitions are known
        p[0] = MethodRef(label=p[1], type_name=p[3], lexpos=p.lexpos(3))

    # -- Function signatures -------------------------------------------------

    def p_func_sig(self, p: yacc.YaccProduction) -> None:
        """func_sig : LPAREN args RPAREN ARROW LPAREN args RPAREN modes"""
        p[0] = FuncSignature(args=p[2], rets=p[6], modes=p[8])

    def p_modes_multiple(self, p: yacc.YaccProduction) -> None:
        """modes : modes QUERY
                 | modes COMPOSITE_QUERY
                 | modes ONEWAY"""
        p[0] = p[1] + [p[2]]

    def p_modes_empty(self, p: yacc.YaccProduction) -> None:
        """modes : empty"""
        p[0] = []

    def p_args(self, p: yacc.YaccProduction) -> None:
        """args : arg_list
                | arg_list COMMA"""
        p[0] = p[1]

    def p_args_empty(self, p: yacc.YaccProduction) -> None:
        """args : empty"""
        p[0] = []

    def p_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg"""
        p[0] = [p[1]]

    def p_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg_list COMMA arg"""
        p[0] = p[1] + [p[3]]

    def p_arg_named(self, p: yacc.YaccProduction) -> None:
        """arg : label COLON datatype"""
        p[0] = (p[1], p[3].text)

    def p_arg_bare(self, p: yacc.YaccProduction) -> None:
        """arg : datatype"""
        p[0] = (None, p[1].text)

    # -- Datatypes -----------------------------------------------------------

    def p_datatype_name(self, p: yacc.YaccProduction) -> None:
        """datatype : IDENTIFIER"""
        p[0] = TypeNode(text=p[1])

    def p_datatype_wrapped(self, p: yacc.YaccProduction) -> None:
        """datatype : OPT datatype
                    | VEC datatype"""
        p[0] = TypeNode(text=f"{p[1]} {p[2].text}")

    def p_datatype_angle(self, p: yacc.YaccProduction) -> None:
        """datatype : OPT LANGLE datatype RANGLE
                    | VEC LANGLE datatype RANGLE"""
        p[0] = TypeNode(text=f"{p[1]} {p[3].text}")

    def p_datatype_record(self, p: yacc.YaccProduction) -> None:
        """datatype : RECORD LBRACE fields RBRACE
                    | VARIANT LBRACE fields RBRACE"""
        p[0] = TypeNode(text=_render_fields(p[1], p[3]))

    def p_datatype_func(self, p: yacc.YaccProduction) -> None:
        """datatype : FUNC func_sig"""
        p[0] = TypeNode(text=f"func {p[2].render()}", func=p[2])

    def p_datatype_service(self, p: yacc.YaccProduction) -> None:
        """datatype : SERVICE service_body"""
        methods = p[2]
        body = "; ".join(self._method_text(m) for m in methods)
        text = f"service {{ {body} }}" if methods else "service {}"
        p[0] = TypeNode(text=text, methods=methods)

    def p_fields(self, p: yacc.YaccProduction) -> None:
        """fields : field_list
                  | field_list SEMI"""
        p[0] = p[1]

    def p_fields_empty(self, p: yacc.YaccProduction) -> None:
        """fields : empty"""
        p[0] = []

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list SEMI field"""
        p[0] = p[1] + [p[3]]

    def p_field_labelled(self, p: yacc.YaccProduction) -> None:
        """field : label COLON datatype"""
        p[0] = (p[1], p[3].text)

    def p_field_bare(self, p: yacc.YaccProduction) -> None:
        """field : datatype"""
        p[0] = (None, p[1].text)

    def p_label(self, p: yacc.YaccProduction) -> None:
        """label : IDENTIFIER
                 | TEXT
                 | NUMBER"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(
                f"Syntax error at '{p.value}' (line {p.lineno}, position {p.lexpos})"
            )
        else:
            raise SyntaxError("Syntax error at end of input")

    # -- Helpers -------------------------------------------------------------

    @staticmethod
    def _method_text(method: MethodInfo | MethodRef) -> str:
        if isinstance(method, MethodRef):
            return f"{method.label} : {method.type_name}"
        return f"{method.name} : func {method.signature().split(' : ', 1)[1]}"

    @staticmethod
    def _method(label: str, sig: FuncSignature) -> MethodInfo:
        return MethodInfo(
            name=_unquote(label),
            kind=sig.kind,
            args=[ty for _, ty in sig.args],
            rets=[ty for _, ty in sig.rets],
            arg_names=[name for name, _ in sig.args],
        )

    def _register_types(self) -> None:
        self._types = {}
        for name, node, lexpos in self._definitions:
            if name in self._types:
                raise SyntaxError(f"Type '{name}' is already defined (position {lexpos})")
            self._types[name] = node

    def _resolve_methods(self, methods: list[MethodInfo | MethodRef]) -> list[MethodInfo]:
        resolved = []
        for m in methods:
            if isinstance(m, MethodRef):
                node = self._types.get(m.type_name)
                if node is None or node.func is None:
                    raise SyntaxError(
                        f"Method '{_unquote(m.label)}' refers to '{m.type_name}', "
                        f"which is not a function type (position {m.lexpos})"
                    )
                m = self._method(m.label, node.func)
            resolved.append(m)
        return resolved

    def _actor_methods(self, actor_type: Any) -> list[MethodInfo]:
        if isinstance(actor_type, list):
            return self._resolve_methods(actor_type)
        node = self._types.get(actor_type)
        if node is None or node.methods is None:
            raise SyntaxError(f"Service type '{actor_type}' is not defined")
        return self._resolve_methods(node.methods)

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> ParsedInterface:
        """Parse a Candid interface and return its methods and type table."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self._definitions = []
        self.lexer.lexer.lineno = 1
        actor = self.parser.parse(data, lexer=self.lexer.lexer)
        self._register_types()

        methods: list[MethodInfo] = []
        init_args: list[str] = []
        if actor is not None:
            init, actor_type = actor
            init_args = [ty for _, ty in init]
            methods = self._actor_methods(actor_type)

        aliases = {name: node.text for name, node in self._types.items()}
        logger.debug("Parsed interface: %d types, %d methods", len(aliases), len(methods))
        return ParsedInterface(methods=methods, aliases=aliases, init_args=init_args)


def parse_interface(source: str) -> ParsedInterface:
    """Parse ``source`` with a fresh InterfaceParser."""
    return InterfaceParser().parse(source)
