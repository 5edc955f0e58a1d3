"""Discovery of lifecycle hook extensions from a directory of Python modules."""

import importlib.util
import os
import sys
from pathlib import Path


def _discover_extension_files(extensions_dir):
    """Find .py files in extensions dir + one level into subdirectories."""
    py_files = []
    for entry in sorted(os.listdir(extensions_dir)):
        full = os.path.join(extensions_dir, entry)
        if entry.startswith(('_', '.')):
            continue
        if entry.endswith('.py') and os.path.isfile(full):
            py_files.append(full)
        elif os.path.isdir(full):
            for sub in sorted(os.listdir(full)):
                sub_full = os.path.join(full, sub)
                if (sub.endswith('.py') and not sub.startswith(('_', '.'))
                        and os.path.isfile(sub_full)):
                    py_files.append(sub_full)
    return py_files


def _is_hook_class(obj, mod_name):
    """Check if obj is a lifecycle hook class defined in the given module."""
    return (isinstance(obj, type)
            and hasattr(obj, 'before_start') and callable(obj.before_start)
            and obj.__module__ == mod_name)


def load_extensions(extensions_dir):
    """Instantiate hook classes found in *extensions_dir*, sorted by priority."""
    hooks = []
    for filepath in _discover_extension_files(extensions_dir):
        parent = str(Path(filepath).parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)
        mod_name = f"otelcol2compose_ext_{Path(filepath).stem}"
        spec = importlib.util.spec_from_file_location(mod_name, filepath)
        if spec is None or spec.loader is None:
            continue
        try:
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        except Exception as exc:  # pylint: disable=broad-except
            print(f"Warning: failed to load {filepath}: {exc}", file=sys.stderr)
            continue
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if _is_hook_class(obj, mod_name):
                try:
                    hooks.append(obj())
                except TypeError as exc:
                    print(f"Warning: cannot instantiate {attr_name} from {filepath}: {exc}",
                          file=sys.stderr)

    # Lower priority runs earlier. Default 100.
    hooks.sort(key=lambda h: getattr(h, 'priority', 100))
    if hooks:
        loaded = ", ".join(type(h).__name__ for h in hooks)
        print(f"Loaded hooks: {loaded}", file=sys.stderr)
    return hooks
