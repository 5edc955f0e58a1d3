"""Lifecycle hook base class and registry."""

from otelcol2compose.pacts.types import HookContext


class LifecycleHook:
    """Base class for hooks run over the whole application before launch.

    A hook is a pure function of the declared services: it returns the
    environment variables to add, keyed by service name, and leaves applying
    them to the caller.
    """
    name: str = ""
    priority: int = 100

    def before_start(self, services: dict, ctx: HookContext) -> dict[str, dict[str, str]]:
        """Return ``{service_name: {VAR: value}}`` additions."""
        return {}


class HookRegistry:
    """Ordered set of lifecycle hooks, at most one instance per hook class."""

    def __init__(self, hooks=None):
        self._hooks: list[LifecycleHook] = []
        for hook in hooks or []:
            self.try_add(hook)

    def try_add(self, hook: LifecycleHook) -> bool:
        """Register *hook* unless a hook of the same class is already present."""
        if any(type(h) is type(hook) for h in self._hooks):
            return False
        self._hooks.append(hook)
        return True

    @property
    def hooks(self) -> list[LifecycleHook]:
        """Registered hooks, lowest priority first (stable for equal priorities)."""
        return sorted(self._hooks, key=lambda h: getattr(h, "priority", 100))

    def __len__(self) -> int:
        return len(self._hooks)


def apply_hooks(services: dict, registry: HookRegistry, ctx: HookContext) -> None:
    """Run every hook and merge its environment additions into *services*.

    Hooks see the services as they stood before any hook ran.
    """
    snapshot = {name: dict(svc, environment=dict(svc.get("environment") or {}))
                for name, svc in services.items()}
    for hook in registry.hooks:
        additions = hook.before_start(snapshot, ctx) or {}
        for svc_name, env in additions.items():
            if svc_name not in services:
                ctx.warnings.append(
                    f"hook '{hook.name or type(hook).__name__}' targets unknown service "
                    f"'{svc_name}' — skipped")
                continue
            services[svc_name].setdefault("environment", {}).update(env)
