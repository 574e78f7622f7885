import pytest
from unittest.mock import patch
from xdir.core.dependencies import DependencyAnalyzer
from xdir.core.models import Config, FileRecord, RecordSet


def make_records(files):
    records = RecordSet()
    for path, content in files.items():
        records.add(FileRecord(path=path, size=len(content.encode("utf-8")), content=content))
    return records


def edges(record, attr="imports"):
    return [(edge.path, edge.type) for edge in getattr(record.dependencies, attr)]


class TestJavaScriptExtraction:
    @pytest.fixture
    def analyzer(self, tmp_path):
        return DependencyAnalyzer(Config(), str(tmp_path))

    def test_import_forms(self, analyzer):
        source = "\n".join([
            "import React from 'react';",
            "import { a } from './a.js';",
            "const fp = require('lodash/fp');",
            "import './styles.css';",
            "const lazy = import('./lazy.js');",
            "export { z } from '../z';",
            "import {",
            "  one,",
            "} from './multi.js';",
        ])
        record = FileRecord(path="app.js", size=len(source), content=source)

        analyzer.extract(record)

        assert edges(record) == [
            ("react", "standard"),
            ("./a.js", "local"),
            ("lodash/fp", "external"),
            ("./styles.css", "local"),
            ("./lazy.js", "local"),
            ("../z", "local"),
            ("./multi.js", "local"),
        ]

    def test_typescript_dispatch(self, analyzer):
        record = FileRecord(path="view.tsx", size=0, content='import x from "@scope/pkg"')
        analyzer.extract(record)
        assert edges(record) == [("@scope/pkg", "external")]

    def test_malformed_source_tolerated(self, analyzer):
        record = FileRecord(path="broken.js", size=0, content="import { from '\nrequire(\n}}}")
        analyzer.extract(record)
        assert record.dependencies.imports == []


class TestPythonExtraction:
    def test_import_forms(self, tmp_path):
        source = "\n".join([
            "import os",
            "import os.path",
            "from pkg.mod import thing",
            "from . import sibling",
            "    import json",
            "x = 'import nothing'",
        ])
        record = FileRecord(path="tool.py", size=len(source), content=source)

        DependencyAnalyzer(Config(), str(tmp_path)).extract(record)

        assert edges(record) == [
            ("os", "standard"),
            ("os", "standard"),
            ("pkg.mod", "local"),
            (".", "local"),
            ("json", "standard"),
        ]


class TestGoExtraction:
    SOURCE = "\n".join([
        "package main",
        "",
        'import "fmt"',
        "import (",
        '    "os"',
        '    str "strings" // aliased',
        '    _ "github.com/lib/pq"',
        '    "example.com/app/internal/store"',
        ")",
        'import alias "example.com/app/util"',
        "",
        "func main() {}",
    ])

    def test_with_configured_module(self, tmp_path):
        record = FileRecord(path="main.go", size=0, content=self.SOURCE)
        DependencyAnalyzer(Config(go_module="example.com/app"), str(tmp_path)).extract(record)

        assert edges(record) == [
            ("fmt", "standard"),
            ("os", "standard"),
            ("strings", "standard"),
            ("github.com/lib/pq", "external"),
            ("example.com/app/internal/store", "local"),
            ("example.com/app/util", "local"),
        ]

    def test_module_from_go_mod(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/app\n\ngo 1.21\n")
        analyzer = DependencyAnalyzer(Config(), str(tmp_path))
        assert analyzer.go_module == "example.com/app"
        assert analyzer.classify_go("example.com/app/util") == "local"
        assert analyzer.classify_go("example.com/application") == "external"

    def test_without_module(self, tmp_path):
        record = FileRecord(path="main.go", size=0, content=self.SOURCE)
        DependencyAnalyzer(Config(), str(tmp_path)).extract(record)
        assert ("example.com/app/util", "external") in edges(record)

    def test_root_prefixed_imports_are_local(self, tmp_path):
        source = 'import "myproj/util"\nimport (\n    "fmt"\n    "github.com/lib/pq"\n)'
        record = FileRecord(path="main.go", size=0, content=source)
        DependencyAnalyzer(Config(target_dir="myproj"), str(tmp_path)).extract(record)

        assert edges(record) == [
            ("myproj/util", "local"),
            ("fmt", "standard"),
            ("github.com/lib/pq", "external"),
        ]

    def test_relative_import_under_current_root(self, tmp_path):
        record = FileRecord(path="main.go", size=0, content='import "./util"')
        DependencyAnalyzer(Config(), str(tmp_path)).extract(record)
        assert edges(record) == [("./util", "local")]

    def test_go_edge_linked(self, tmp_path):
        records = make_records({
            "main.go": 'package main\n\nimport "./util.go"\n',
            "util.go": "package main\n",
        })

        DependencyAnalyzer(Config(), str(tmp_path)).analyze_all(records)

        assert records.get("main.go").dependencies.imports[0].location == "util.go"
        assert edges(records.get("util.go"), "imported_by") == [("main.go", "local")]

    def test_single_line_block(self, tmp_path):
        record = FileRecord(path="x.go", size=0, content='import ("fmt"; "net/http")\nvar x = 1')
        DependencyAnalyzer(Config(), str(tmp_path)).extract(record)
        assert edges(record) == [("fmt", "standard"), ("net/http", "external")]


class TestUnsupportedFiles:
    def test_no_dependency_info(self, tmp_path):
        record = FileRecord(path="notes.md", size=0, content="import x from './y.js'")
        assert DependencyAnalyzer(Config(), str(tmp_path)).extract(record) is None
        assert record.dependencies is None


class TestLinking:
    @pytest.fixture
    def analyzer(self, tmp_path):
        return DependencyAnalyzer(Config(), str(tmp_path))

    def test_imported_by_edges(self, analyzer):
        records = make_records({
            "c.js": "import a from './a.js';\nimport m from './missing.js';",
            "a.js": "export default 1;",
            "b.js": "import a from './a.js';",
        })

        errors = analyzer.analyze_all(records)

        a, b, c = records.get("a.js"), records.get("b.js"), records.get("c.js")
        assert errors == []
        assert edges(a, "imported_by") == [("b.js", "local"), ("c.js", "local")]
        assert b.dependencies.imports[0].location == "a.js"
        # Unresolved edges stay on the source without a location
        missing = c.dependencies.imports[1]
        assert (missing.path, missing.type, missing.location) == ("./missing.js", "local", None)
        assert edges(b, "imported_by") == []

    def test_relink_does_not_accumulate(self, analyzer):
        records = make_records({
            "a.js": "",
            "b.js": "import a from './a.js';",
        })

        analyzer.analyze_all(records)
        analyzer.analyze_all(records)
        analyzer.link(records)

        assert edges(records.get("a.js"), "imported_by") == [("b.js", "local")]

    def test_target_without_extractor_gets_dependency_info(self, analyzer):
        records = make_records({
            "a.txt": "hello",
            "b.js": "import a from './a.txt';",
        })

        analyzer.analyze_all(records)

        a = records.get("a.txt")
        assert a.dependencies is not None
        assert a.dependencies.imports == []
        assert edges(a, "imported_by") == [("b.js", "local")]

    def test_resolution_is_relative_to_root(self, analyzer):
        records = make_records({
            "lib/a.js": "",
            "src/b.js": "import a from './lib/a.js';\nimport x from '../lib/a.js';",
        })

        analyzer.analyze_all(records)

        assert edges(records.get("lib/a.js"), "imported_by") == [("src/b.js", "local")]
        outside = records.get("src/b.js").dependencies.imports[1]
        assert outside.location is None

    def test_external_and_standard_not_linked(self, analyzer):
        records = make_records({
            "react": "",
            "b.js": "import React from 'react';",
        })

        analyzer.analyze_all(records)

        assert records.get("react").dependencies is None

    def test_extraction_failure_recorded(self, tmp_path):
        records = make_records({
            "a.py": "import os",
            "b.js": "import a from './a.js';",
        })
        with patch.object(DependencyAnalyzer, "_extract_js", side_effect=ValueError("boom")):
            analyzer = DependencyAnalyzer(Config(), str(tmp_path))
            errors = analyzer.analyze_all(records)

        assert len(errors) == 1
        assert "b.js" in errors[0]
        assert records.get("b.js").dependencies is None
        assert edges(records.get("a.py")) == [("os", "standard")]
