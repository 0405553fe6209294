from .executor import command_task, copy_task, mkdir_task, render

__all__ = ["command_task", "mkdir_task", "copy_task", "render"]
