"""
JavaScript proxy emitter.

Emits a CommonJS module exporting one constructor. The constructor owns a
``jsonws-client`` RpcTunnel and inherits from Node's EventEmitter.
"""

from __future__ import annotations

from ..metadata import EnumType, EventDef, MethodDef
from .base import EmitContext, LanguageDescriptor, literal

__all__ = ["JavaScriptEmitter"]


def _member(owner: str, name: str) -> str:
    return f"{owner}[{literal(name)}]"


def _prototype_path(local_name: str, dotted: str) -> str:
    path = f"{local_name}.prototype"
    for part in dotted.split("."):
        path = _member(path, part)
    return path


def _jsdoc(method: MethodDef) -> list[str]:
    lines = ["/**"]
    if method.description:
        lines.extend(f" * {line}".rstrip() for line in method.description.splitlines())
    for param in method.params:
        name = f"[{param.name}]" if param.optional else param.name
        line = f" * @param {{{param.type_ref}}} {name}"
        if param.description:
            line += f" {param.description}"
        lines.append(line)
    lines.append(" * @param {function} [callback]")
    if method.returns is not None:
        lines.append(f" * @returns {{{method.returns}}}")
    lines.append(" */")
    return lines


class JavaScriptEmitter(LanguageDescriptor):
    name = "JavaScript"
    file_extension = ".js"
    indent = "\t"
    separate_items = True

    def begin(self, ctx: EmitContext) -> list[str]:
        t = self.indent
        name = ctx.local_name
        members = ", ".join(literal(m) for m in ctx.root_members)
        return [
            "/**",
            f" * Client proxy for {ctx.title}.",
            " *",
            " * Generated by jsonws. Do not edit.",
            " */",
            "'use strict';",
            "",
            "var EventEmitter = require('events').EventEmitter;",
            "var inherits = require('util').inherits;",
            "var RpcTunnel = require('jsonws-client').RpcTunnel;",
            "",
            "function bindNamespace(source, receiver) {",
            f"{t}var bound = {{}};",
            f"{t}Object.keys(source).forEach(function (key) {{",
            f"{t}{t}var value = source[key];",
            f"{t}{t}bound[key] = typeof value === 'function' ? value.bind(receiver) : bindNamespace(value, receiver);",
            f"{t}}});",
            f"{t}return bound;",
            "}",
            "",
            "/**",
            f" * @param {{string}} url",
            " * @param {object} [sslSettings]",
            " * @constructor",
            " */",
            f"function {name}(url, sslSettings) {{",
            f"{t}if (!(this instanceof {name})) {{",
            f"{t}{t}return new {name}(url, sslSettings);",
            f"{t}}}",
            f"{t}if (typeof url !== 'string' || !url) {{",
            f"{t}{t}throw new TypeError('Invalid argument: a non-empty base URL string is required');",
            f"{t}}}",
            f"{t}EventEmitter.call(this);",
            "",
            f"{t}var self = this;",
            f"{t}this.defaultTransport = 'http';",
            f"{t}this.rpc = new RpcTunnel(url, sslSettings);",
            f"{t}this.rpc.on('event', function (event) {{",
            f"{t}{t}setImmediate(function () {{",
            f"{t}{t}{t}self.emit(event.name, event.data);",
            f"{t}{t}}});",
            f"{t}}});",
            f"{t}this.on('newListener', function (event) {{",
            f"{t}{t}if (event !== 'newListener' && event !== 'removeListener' && self.listeners(event).length === 0) {{",
            f"{t}{t}{t}self.rpc.call({{method: 'rpc.on', params: [event], expectReturn: false, transport: 'socket'}});",
            f"{t}{t}}}",
            f"{t}}});",
            "",
            f"{t}[{members}].forEach(function (key) {{",
            f"{t}{t}var value = {name}.prototype[key];",
            f"{t}{t}self[key] = typeof value === 'function' ? value.bind(self) : bindNamespace(value, self);",
            f"{t}}});",
            "}",
            f"inherits({name}, EventEmitter);",
            "",
            f"{name}.prototype.useHTTP = function () {{",
            f"{t}this.defaultTransport = 'http';",
            f"{t}return this;",
            "};",
            "",
            f"{name}.prototype.useSocket = function () {{",
            f"{t}this.defaultTransport = 'socket';",
            f"{t}return this;",
            "};",
            "",
            f"{name}.prototype.removeListener = function (event, listener) {{",
            f"{t}var hadListeners = this.listeners(event).length > 0;",
            f"{t}EventEmitter.prototype.removeListener.call(this, event, listener);",
            f"{t}if (hadListeners && this.listeners(event).length === 0) {{",
            f"{t}{t}this.rpc.call({{method: 'rpc.off', params: [event], expectReturn: false, transport: 'socket'}});",
            f"{t}}}",
            f"{t}return this;",
            "};",
            "",
            f"{name}.prototype.off = {name}.prototype.removeListener;",
            "",
            f"{name}.prototype.removeAllListeners = function (event) {{",
            f"{t}var self = this;",
            f"{t}var names = event === undefined ? this.eventNames().filter(function (key) {{",
            f"{t}{t}return key !== 'newListener' && key !== 'removeListener';",
            f"{t}}}) : [event];",
            f"{t}names.forEach(function (key) {{",
            f"{t}{t}EventEmitter.prototype.removeAllListeners.call(self, key);",
            f"{t}{t}self.rpc.call({{method: 'rpc.off', params: [key], expectReturn: false, transport: 'socket'}});",
            f"{t}}});",
            f"{t}return this;",
            "};",
            "",
            f"{name}.prototype.close = function () {{",
            f"{t}if (this.rpc) {{",
            f"{t}{t}this.rpc.close();",
            f"{t}{t}this.rpc = null;",
            f"{t}}}",
            "};",
        ]

    def enum(self, ctx: EmitContext, name: str, enum: EnumType) -> list[str]:
        t = self.indent
        labels = literal(enum.members)
        values = literal({str(value): label for label, value in enum.members.items()})
        return [
            f"{_member(ctx.local_name, name)} = (function () {{",
            f"{t}var labels = {labels};",
            f"{t}var values = {values};",
            f"{t}var codec = function (key) {{",
            f"{t}{t}return typeof key === 'number' ? values[key] : labels[key];",
            f"{t}}};",
            f"{t}Object.keys(labels).forEach(function (label) {{",
            f"{t}{t}Object.defineProperty(codec, label, {{value: labels[label], enumerable: true}});",
            f"{t}}});",
            f"{t}return Object.freeze(codec);",
            "})();",
        ]

    def namespace(self, ctx: EmitContext, path: str) -> list[str]:
        return [f"{_prototype_path(ctx.local_name, path)} = {{}};"]

    def method(self, ctx: EmitContext, method: MethodDef) -> list[str]:
        t = self.indent
        return [
            *_jsdoc(method),
            f"{_prototype_path(ctx.local_name, method.name)} = function () {{",
            f"{t}var args = Array.prototype.slice.call(arguments);",
            f"{t}var callback = typeof args[args.length - 1] === 'function' ? args.pop() : null;",
            f"{t}return this.rpc.call({{",
            f"{t}{t}method: {literal(method.name)},",
            f"{t}{t}params: args.slice(0, {len(method.params)}),",
            f"{t}{t}expectReturn: {'true' if method.expects_return else 'false'},",
            f"{t}{t}transport: this.defaultTransport",
            f"{t}}}, callback);",
            "};",
        ]

    def events(self, ctx: EmitContext, events: list[EventDef]) -> list[str]:
        names = ", ".join(literal(event.name) for event in events)
        return [f"{ctx.local_name}.events = Object.freeze([{names}]);"]

    def end(self, ctx: EmitContext) -> list[str]:
        return [f"module.exports = {ctx.local_name};"]
