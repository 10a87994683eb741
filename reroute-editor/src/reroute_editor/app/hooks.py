# app/hooks.py


class NoopHooks:
    def edit_start(self, *_, **__):
        pass

    def edit_applied(self, *_, **__):
        pass

    def edit_discarded(self, *_, **__):
        pass

    def edit_failed(self, *_, **__):
        pass

    def snap_index_rebuilt(self, **_):
        pass

    def export(self, *_, **__):
        pass
