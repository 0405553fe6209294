class GraphError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class CycleError(GraphError):
    def __init__(self, cycle: list[str]):
        super().__init__("Group cycle detected: " + " -> ".join(cycle))
        self.cycle = cycle
