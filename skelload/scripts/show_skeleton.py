from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Sequence

from skelload.assembly import AssemblyResult, Diagnostic, Skeleton
from skelload.assembly.diagnostics import ERROR, WARNING
from skelload.config import AssemblyConfig, LoaderConfig
from skelload.sdf import ModelDescription, WorldDescription, read_sdf_document
from skelload.world import assemble_model

PROJECT_ROOT = Path(__file__).resolve().parents[2]
MODELS_DIR = PROJECT_ROOT / "models"
SDF_SUFFIXES = (".sdf", ".world")


def find_sdf_documents(root: Path) -> list[Path]:
    """Return every SDF model or world document beneath ``root``, sorted by relative path."""

    if not root.is_dir():
        return []
    documents = [
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in SDF_SUFFIXES
    ]
    return sorted(documents, key=lambda p: p.relative_to(root).as_posix().lower())


def select_option(
    title: str,
    options: Sequence[str],
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> str:
    """Ask for one of ``options`` by number or by name and return it."""

    if not options:
        raise ValueError(f"Nothing to select for {title!r}.")
    if len(options) == 1:
        return options[0]

    by_name = {option.lower(): option for option in options}
    print_fn(title)
    for number, option in enumerate(options, start=1):
        print_fn(f"  [{number}] {option}")
    while True:
        answer = input_fn("> ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        if answer.lower() in by_name:
            return by_name[answer.lower()]
        print_fn(f"Unknown selection {answer!r}; enter 1-{len(options)} or a listed name.")


def _matches(document: Path, root: Path, name: str) -> bool:
    relative = document.relative_to(root)
    parts = [part.lower() for part in relative.parent.parts]
    return document.stem.lower() == name or name in parts


def resolve_sdf_path(
    target: str | None,
    models_root: Path,
    *,
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> Path:
    """Resolve ``target`` to one SDF document.

    ``target`` may be a file, a directory to search, or a name matched against
    document stems and directory names under ``models_root``. Several matches
    are offered for interactive selection.
    """

    search_root = models_root
    if target:
        candidate = Path(target).expanduser()
        if candidate.is_file():
            return candidate.resolve()
        if candidate.is_dir():
            search_root = candidate

    documents = find_sdf_documents(search_root)
    if target and search_root is models_root:
        documents = [d for d in documents if _matches(d, search_root, target.lower())]
        if not documents:
            raise FileNotFoundError(f"No SDF document named {target!r} under {models_root}.")
    if not documents:
        raise FileNotFoundError(f"No SDF documents found under {search_root}.")

    labels = [d.relative_to(search_root).as_posix() for d in documents]
    chosen = select_option("Select an SDF document:", labels, input_fn, print_fn)
    return documents[labels.index(chosen)].resolve()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assemble the skeletons of an SDF model or world and print their trees."
    )
    parser.add_argument(
        "target",
        nargs="?",
        help=(
            "SDF file, directory, or document name under models/. "
            "If omitted, an interactive selector will be shown."
        ),
    )
    parser.add_argument(
        "--models-dir",
        type=Path,
        default=MODELS_DIR,
        help="Directory searched for documents given by name.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Only assemble the <model> with this name.",
    )
    parser.add_argument(
        "--no-unjointed-roots",
        action="store_true",
        help="Do not attach links that no joint references to the world.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def format_tree(skeleton: Skeleton) -> list[str]:
    lines = []

    def visit(body, depth: int) -> None:
        joint = skeleton.parent_joint(body)
        soft = " [soft]" if body.is_soft else ""
        lines.append(
            f"{'  ' * depth}{body.name}{soft} <- {joint.name} ({joint.type.value}, {joint.dofs} dof)"
        )
        for child in skeleton.children_of(body):
            visit(child, depth + 1)

    for root in skeleton.roots():
        visit(root, 0)
    return lines


def print_diagnostics(
    diagnostics: Iterable[Diagnostic], print_fn: Callable[[str], None] = print
) -> None:
    use_color = sys.stdout.isatty()

    def colorize(text: str, code: str) -> str:
        if not use_color:
            return text
        reset = "\033[0m"
        return f"{code}{text}{reset}"

    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"

    stats = {"info": 0, "warn": 0, "fail": 0}

    for diagnostic in diagnostics:
        if diagnostic.severity == ERROR:
            status_label, status_color = "FAIL", RED
            stats["fail"] += 1
        elif diagnostic.severity == WARNING:
            status_label, status_color = "WARN", YELLOW
            stats["warn"] += 1
        else:
            status_label, status_color = "INFO", GREEN
            stats["info"] += 1
        formatted = colorize(f"[{status_label}]", status_color)
        print_fn(f"  {formatted} {diagnostic.code}: {diagnostic.message}")
        for key, value in diagnostic.details.items():
            print_fn(f"      - {key}: {value}")

    summary_parts = []
    if stats["info"]:
        summary_parts.append(colorize(f"{stats['info']} notes", GREEN))
    if stats["warn"]:
        summary_parts.append(colorize(f"{stats['warn']} warnings", YELLOW))
    if stats["fail"]:
        summary_parts.append(colorize(f"{stats['fail']} failures", RED))
    if not summary_parts:
        summary_parts.append("no diagnostics")

    print_fn("  Summary: " + ", ".join(summary_parts))


def report_model(model: ModelDescription, result: AssemblyResult) -> bool:
    print(f"Model {model.name!r} diagnostics:")
    print_diagnostics(result.diagnostics)
    if not result.ok:
        print(f"Assembly of {model.name} failed.", file=sys.stderr)
        return False

    skeleton = result.unwrap()
    print(f"Skeleton {skeleton.name!r}: {len(skeleton)} bodies, {skeleton.num_dofs} dofs")
    for line in format_tree(skeleton):
        print("  " + line)
    return True


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = LoaderConfig(
        assembly=AssemblyConfig(attach_unjointed_links=not args.no_unjointed_roots)
    )
    try:
        sdf_path = resolve_sdf_path(args.target, args.models_dir)
        document = read_sdf_document(sdf_path, config)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if isinstance(document, WorldDescription):
        gx, gy, gz = document.gravity
        print(
            f"World {document.name!r}: {len(document.models)} models, "
            f"time step {document.time_step:g} s, gravity ({gx:g}, {gy:g}, {gz:g})"
        )
        models = document.models
    else:
        models = (document,)

    if args.model is not None:
        models = tuple(m for m in models if m.name == args.model)
        if not models:
            print(f"Error: no model {args.model!r} in {sdf_path.name}", file=sys.stderr)
            return 1

    failed = []
    for model in models:
        print("")
        if not report_model(model, assemble_model(model, config)):
            failed.append(model.name)

    if failed:
        print("")
        print("Failed models: " + ", ".join(failed))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
