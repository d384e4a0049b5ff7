"""
Tests for the kmpscaffold command line.
"""

from pathlib import Path

from kmpscaffold import main


class TestScaffoldCommand:
    def test_success(self, gradle_project: Path, capsys):
        code = main(["scaffold", "Payments", "--root", str(gradle_project), "--base-package", "com.acme"])
        out = capsys.readouterr().out
        assert code == 0
        assert 'Appended: include(":features:payments:payments-api")' in out
        assert "Feature module 'Payments' created" in out
        assert (gradle_project / "features/payments/payments-impl/build.gradle.kts").is_file()

    def test_already_exists(self, gradle_project: Path, capsys):
        args = ["scaffold", "Payments", "--root", str(gradle_project), "--base-package", "com.acme"]
        assert main(args) == 0
        capsys.readouterr()
        assert main(args) == 3
        assert "AlreadyExists" in capsys.readouterr().err

    def test_blank_name(self, gradle_project: Path, capsys):
        assert main(["scaffold", "  ", "--root", str(gradle_project)]) == 2
        assert "Module name cannot be empty" in capsys.readouterr().err

    def test_colon_in_name(self, gradle_project: Path, capsys):
        settings = (gradle_project / "settings.gradle.kts").read_text(encoding="utf-8")
        assert main(["scaffold", "pay:ments", "--root", str(gradle_project), "--base-package", "com.acme"]) == 2
        assert "InvalidInput" in capsys.readouterr().err
        assert (gradle_project / "settings.gradle.kts").read_text(encoding="utf-8") == settings
        assert not (gradle_project / "features").exists()

    def test_empty_base_package(self, gradle_project: Path, capsys):
        assert main(["scaffold", "Payments", "--root", str(gradle_project), "--base-package", ""]) == 2
        assert "Base package cannot be empty" in capsys.readouterr().err
        assert not (gradle_project / "features").exists()

    def test_missing_root(self, tmp_path: Path, capsys):
        assert main(["scaffold", "Payments", "--root", str(tmp_path / "missing")]) == 4
        assert "PathResolutionFailure" in capsys.readouterr().err

    def test_missing_settings(self, gradle_project: Path, capsys):
        (gradle_project / "settings.gradle.kts").unlink()
        assert main(["scaffold", "Payments", "--root", str(gradle_project)]) == 6
        err = capsys.readouterr().err
        assert "SettingsUpdateFailure" in err
        assert "rolled back" in err
        assert not (gradle_project / "features").exists()

    def test_dry_run(self, gradle_project: Path, capsys):
        code = main(["scaffold", "Payments", "--root", str(gradle_project), "--dry-run"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Would create: features" in out
        assert "Would append" in out
        assert not (gradle_project / "features").exists()

    def test_layout_and_no_impl(self, gradle_project: Path):
        code = main(["scaffold", "Cart", "--root", str(gradle_project), "--base-package", "com.acme",
                     "--layout", "kmp-feature", "--no-impl"])
        assert code == 0
        api_dir = gradle_project / "features/cart/cart-api/src/commonMain/kotlin/com/acme/cartapi"
        assert (api_dir / "CartFeatureApi.kt").is_file()
        assert not list((gradle_project / "features/cart/cart-impl").rglob("*.kt"))

    def test_unknown_layout(self, gradle_project: Path, capsys):
        assert main(["scaffold", "Cart", "--root", str(gradle_project), "--layout", "bogus"]) == 2
        assert "Unknown layout" in capsys.readouterr().err

    def test_config_file(self, gradle_project: Path):
        (gradle_project / ".kmpscaffold.yaml").write_text("layout: flat\nbase_package: org.shop\n", encoding="utf-8")
        assert main(["scaffold", "Cart", "--root", str(gradle_project)]) == 0
        assert (gradle_project / "features/cart/api/src/commonMain/kotlin/org/shop/cartapi/CartApi.kt").is_file()

    def test_bad_config_file(self, gradle_project: Path, capsys):
        (gradle_project / ".kmpscaffold.yaml").write_text("colour: blue\n", encoding="utf-8")
        assert main(["scaffold", "Cart", "--root", str(gradle_project)]) == 2
        assert "Unknown config key" in capsys.readouterr().err

    def test_default_root_is_cwd(self, gradle_project: Path, monkeypatch):
        monkeypatch.chdir(gradle_project)
        assert main(["scaffold", "Cart", "--base-package", "com.acme"]) == 0
        assert (gradle_project / "features/cart/cart-api").is_dir()


class TestResolveCommand:
    def test_from_sources(self, gradle_project: Path, write_source, capsys):
        write_source(gradle_project, "src/main/kotlin/com/acme/app/App.kt", "package com.acme.app\n")
        assert main(["resolve", "--root", str(gradle_project)]) == 0
        assert capsys.readouterr().out.strip() == "com.acme"

    def test_project_name_fallback(self, tmp_path: Path, capsys):
        assert main(["resolve", "--root", str(tmp_path), "--project-name", "Demo"]) == 0
        assert capsys.readouterr().out.strip() == "com.demo"

    def test_missing_root(self, tmp_path: Path, capsys):
        assert main(["resolve", "--root", str(tmp_path / "missing")]) == 4


class TestLayoutsCommand:
    def test_lists_layouts(self, capsys):
        assert main(["layouts"]) == 0
        out = capsys.readouterr().out
        for name in ("flat:", "kmp:", "kmp-feature:"):
            assert name in out
