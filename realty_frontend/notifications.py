# realty_frontend/notifications.py
# Transient user-facing notifications (toast equivalents)

from typing import Literal

import streamlit as st
from streamlit import runtime

Variant = Literal["default", "destructive"]


class Notifier:
    """Interface used by the session store and services to report outcomes."""

    def notify(self, title: str, description: str = "", variant: Variant = "default") -> None:
        raise NotImplementedError

    def success(self, title: str, description: str = "") -> None:
        self.notify(title, description, "default")

    def failure(self, title: str, description: str = "") -> None:
        self.notify(title, description, "destructive")


class ConsoleNotifier(Notifier):
    """Prints notifications; the default outside a running Streamlit app."""

    def notify(self, title: str, description: str = "", variant: Variant = "default") -> None:
        prefix = "❌" if variant == "destructive" else "✅"
        line = f"[NOTIFY] {prefix} {title}"
        if description:
            line += f": {description}"
        print(line)


class StreamlitNotifier(Notifier):
    """Shows notifications as Streamlit toasts; failures also render inline."""

    def notify(self, title: str, description: str = "", variant: Variant = "default") -> None:
        text = f"**{title}**"
        if description:
            text += f"  \n{description}"
        if variant == "destructive":
            st.toast(text, icon="⚠️")
            st.error(f"{title}: {description}" if description else title)
        else:
            st.toast(text, icon="✅")


def default_notifier() -> Notifier:
    """StreamlitNotifier inside a running Streamlit app, ConsoleNotifier otherwise."""
    if runtime.exists():
        return StreamlitNotifier()
    return ConsoleNotifier()
