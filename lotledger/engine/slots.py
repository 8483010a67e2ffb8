# lotledger/engine/slots.py


class Slots:
    """Hierarchical key/value store attached to a ledger entity.

    Keys are slash-separated paths (``"lot-mgmt/notes"``); intermediate
    frames are created on demand.  Leading and trailing slashes are ignored,
    so ``"/title"`` and ``"title"`` name the same slot.
    """

    def __init__(self, data=None):
        self._frame: dict = {}
        for key, value in (data or {}).items():
            self.set(key, value)

    @staticmethod
    def _split(path: str) -> list[str]:
        parts = [p for p in path.split("/") if p]
        if not parts:
            raise KeyError(f"Empty slot path: {path!r}")
        return parts

    def get(self, path: str, default=None):
        frame = self._frame
        for part in self._split(path):
            if not isinstance(frame, dict) or part not in frame:
                return default
            frame = frame[part]
        return frame

    def set(self, path: str, value):
        parts = self._split(path)
        frame = self._frame
        for part in parts[:-1]:
            child = frame.get(part)
            if not isinstance(child, dict):
                child = {}
                frame[part] = child
            frame = child
        frame[parts[-1]] = value

    def delete(self, path: str):
        parts = self._split(path)
        frame = self.get("/".join(parts[:-1])) if len(parts) > 1 else self._frame
        if isinstance(frame, dict):
            frame.pop(parts[-1], None)

    def get_frame(self, path: str) -> dict:
        """Return the sub-frame at *path*, creating it if it does not exist."""
        frame = self._frame
        for part in self._split(path):
            child = frame.get(part)
            if not isinstance(child, dict):
                child = {}
                frame[part] = child
            frame = child
        return frame

    def to_dict(self) -> dict:
        def _copy(frame):
            return {k: _copy(v) if isinstance(v, dict) else v for k, v in frame.items()}

        return _copy(self._frame)

    def __contains__(self, path: str) -> bool:
        sentinel = object()
        return self.get(path, sentinel) is not sentinel

    def __bool__(self) -> bool:
        return bool(self._frame)

    def __repr__(self):
        return f"Slots({self.to_dict()!r})"
