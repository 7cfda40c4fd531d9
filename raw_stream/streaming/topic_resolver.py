"""
Topic name resolution against a node's scope.
"""

from raw_stream.config.models import NodeConfig


class TopicResolver:
    """
    Resolves topic names to fully qualified names.

    Supports three forms:
    - absolute: "/raw_data_stream" is used as is
    - private: "~/raw_data_stream" becomes "{namespace}/{node}/raw_data_stream"
    - relative: "raw_data_stream" becomes "{namespace}/raw_data_stream"

    Resolved names are then looked up in the node's remappings.
    """

    def __init__(self, node: NodeConfig) -> None:
        self._namespace = node.namespace.rstrip("/")
        self._node_name = node.name
        self._remappings = dict(node.remappings)

    def resolve(self, name: str) -> str:
        """
        Resolve a topic name.

        Args:
            name: Topic name as written by the caller (e.g. "~/raw_data_stream")

        Returns:
            Fully qualified topic name

        Raises:
            ValueError: If the name is empty
        """
        if not name:
            raise ValueError("Topic name must not be empty")

        if name.startswith("/"):
            resolved = name
        elif name.startswith("~"):
            suffix = name[1:].lstrip("/")
            resolved = f"{self._namespace}/{self._node_name}"
            if suffix:
                resolved += f"/{suffix}"
        else:
            resolved = f"{self._namespace}/{name}"

        return self._remappings.get(resolved, resolved)
