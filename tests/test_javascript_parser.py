"""Tests for JavaScript/TypeScript parsers."""

import pytest

from repograph.core.models import DependencyKind, SymbolKind
from repograph.parsers.javascript import JavaScriptParser, TypeScriptParser


@pytest.fixture
def ts_parser():
    return TypeScriptParser()


@pytest.fixture
def sample_ts_code():
    return """import React, { useState } from 'react';
import { format } from "./utils/format";
import './styles.css';

/**
 * Props for the widget.
 */
export interface WidgetProps extends BaseProps {
    title: string;
}

export type Id = string;

export class Widget extends Component implements Renderable, Disposable {
    render() {
        return format(this.props.title);
    }
}

export async function loadWidget(id, options) {
    const data = await fetchData(id);
    if (data) {
        notify(data);
    }
    return data;
}

let counter = 0;
var legacy = true;

export { Widget as DefaultWidget, loadWidget };
export default Widget;
"""


def _find(result, name):
    return next(s for s in result.symbols if s.name == name)


def test_language_and_extensions():
    assert JavaScriptParser().language == "javascript"
    assert ".mjs" in JavaScriptParser().get_supported_extensions()
    assert TypeScriptParser().language == "typescript"
    assert TypeScriptParser().get_supported_extensions() == [".ts", ".tsx"]


def test_metadata_reports_instance_language():
    code = "function a() {}"
    assert JavaScriptParser().parse(code).metadata.language == "javascript"
    assert TypeScriptParser().parse(code).metadata.language == "typescript"


def test_declarations(ts_parser, sample_ts_code):
    result = ts_parser.parse(sample_ts_code, "widget.ts")

    interface = _find(result, "WidgetProps")
    assert interface.kind == SymbolKind.INTERFACE
    assert interface.documentation == "Props for the widget."

    assert _find(result, "Id").kind == SymbolKind.TYPE
    assert _find(result, "Widget").kind == SymbolKind.CLASS

    load = _find(result, "loadWidget")
    assert load.kind == SymbolKind.FUNCTION
    assert load.signature == "(id, options)"

    variables = {s.name for s in result.symbols if s.kind == SymbolKind.VARIABLE}
    assert variables == {"data", "counter", "legacy"}


def test_exported_declarations_are_not_export_symbols(ts_parser, sample_ts_code):
    result = ts_parser.parse(sample_ts_code)
    exports = [s.name for s in result.symbols if s.kind == SymbolKind.EXPORT]

    # Only the export list produces export symbols; "export default Widget" too
    assert exports == ["DefaultWidget", "loadWidget", "Widget"]


def test_imports(ts_parser, sample_ts_code):
    result = ts_parser.parse(sample_ts_code)

    imports = [s.name for s in result.symbols if s.kind == SymbolKind.IMPORT]
    assert imports == ["React", "format"]

    deps = [d for d in result.dependencies if d.kind == DependencyKind.IMPORTS]
    assert [d.target_name for d in deps] == ["react", "./utils/format", "./styles.css"]
    assert deps[0].metadata == {"importType": "module", "fullPath": "react"}
    assert deps[2].metadata["importType"] == "side-effect"


def test_heritage(ts_parser, sample_ts_code):
    result = ts_parser.parse(sample_ts_code)

    extends = [d.target_name for d in result.dependencies if d.kind == DependencyKind.EXTENDS]
    assert extends == ["BaseProps", "Component"]

    implements = [
        d.target_name for d in result.dependencies if d.kind == DependencyKind.IMPLEMENTS
    ]
    assert implements == ["Renderable", "Disposable"]


def test_calls(ts_parser, sample_ts_code):
    result = ts_parser.parse(sample_ts_code)
    calls = [d.target_name for d in result.dependencies if d.kind == DependencyKind.CALLS]

    assert "fetchData" in calls
    assert "notify" in calls
    assert "format" in calls
    # function and if lines are guarded
    assert "loadWidget" not in calls


def test_empty_and_garbage_input(ts_parser):
    assert ts_parser.parse("").symbols == []

    result = ts_parser.parse("}}}{{{ ::: ===")
    assert result.symbols == []
    assert result.metadata.symbol_count == 0
