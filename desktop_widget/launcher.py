import subprocess
import sys


def open_main_app(command):
    """啟動主程式；未設定指令或啟動失敗時略過。"""
    if not command:
        return False
    kwargs = {}
    if sys.platform.startswith("win"):
        kwargs["creationflags"] = 0x00000008  # DETACHED_PROCESS
    else:
        kwargs["start_new_session"] = True
    try:
        subprocess.Popen(list(command), **kwargs)
    except (OSError, ValueError):
        return False
    return True
