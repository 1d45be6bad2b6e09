# uiflow_core/resolver.py
"""
@file resolver.py
@brief Compiles selectors into filters and resolves them against the device.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from uiflow_core import filters as F
from uiflow_core.config import TimeConfig
from uiflow_core.exceptions import ElementNotFoundError
from uiflow_core.filters import ElementFilter, FilterWithDescription
from uiflow_core.interfaces import IDriver
from uiflow_core.selectors import ElementSelector
from uiflow_core.traits import build_trait_filter
from uiflow_core.tree import DeviceInfo, TreeNode, UiElement
from uiflow_core.waits import poll_until


class Resolver:
    """
    Resolves element selectors to concrete elements on the device.

    Lookups poll the driver's view hierarchy until the compiled filter
    matches or the lookup timeout expires.
    """

    def __init__(
        self,
        driver: IDriver,
        timings: Optional[TimeConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        @param driver Device driver used to capture hierarchies
        @param timings Lookup timeouts (defaults when None)
        @param logger Logger for lookup diagnostics
        """
        self.driver = driver
        self.timings = timings or TimeConfig()
        self.log = logger or logging.getLogger("uiflow.resolver")

    def resolve(self, selector: ElementSelector, timeout: Optional[float] = None) -> UiElement:
        """
        Find the first element matching selector.

        @param selector Selector to resolve
        @param timeout Override timeout; defaults to the optional or mandatory
                       lookup timeout depending on selector.optional
        @return Resolved element with bounds
        @throws ElementNotFoundError if nothing matches before the timeout
        """
        settings = self.timings.lookup_settings(selector.optional)
        effective_timeout = timeout if timeout is not None else settings.timeout

        compiled = self.build_filter(
            selector,
            self.driver.device_info(),
            self.driver.capture_view_hierarchy().aggregate(),
        )
        self.log.debug("Resolving '%s' (timeout=%ss)", compiled.description, effective_timeout)

        def probe() -> Optional[UiElement]:
            nodes = self.driver.capture_view_hierarchy().aggregate()
            for node in compiled.filter_func(nodes):
                if node.bounds is not None:
                    return UiElement.from_tree_node(node)
            return None

        element = poll_until(
            effective_timeout,
            probe,
            interval=settings.interval,
            jitter=settings.jitter,
            description=f"element '{compiled.description}'",
        )
        if element is None:
            raise ElementNotFoundError(
                f"Element not found: {compiled.description}",
                hierarchy=self.driver.capture_view_hierarchy(),
                description=compiled.description,
                timeout=effective_timeout,
            )
        return element

    def build_filter(
        self,
        selector: ElementSelector,
        device_info: DeviceInfo,
        all_nodes: List[TreeNode],
    ) -> FilterWithDescription:
        """
        Compile a selector into one filter plus a human-readable description.

        Criteria are AND-combined; nested relative selectors are compiled
        against the same node list as the outer selector. The index, if any,
        picks from the combined result. contains_child is resolved eagerly
        and may poll.

        The description is the selector's own description(); index is not
        part of it.
        """
        filters: List[ElementFilter] = []

        if selector.text_regex is not None:
            filters.append(F.as_filter(F.text_matches(F.compile_regex(selector.text_regex))))

        if selector.id_regex is not None:
            filters.append(F.as_filter(F.id_matches(F.compile_regex(selector.id_regex))))

        if selector.size is not None:
            size = selector.size
            filters.append(F.as_filter(F.size_matches(
                width=size.width,
                height=size.height,
                tolerance=size.tolerance,
            )))

        relative = (
            (selector.below, F.below),
            (selector.above, F.above),
            (selector.left_of, F.left_of),
            (selector.right_of, F.right_of),
        )
        for nested, position in relative:
            if nested is not None:
                inner = self.build_filter(nested, device_info, all_nodes)
                filters.append(position(inner.filter_func, device_info))

        if selector.contains_child is not None:
            child = self.resolve(selector.contains_child, timeout=self.timings.lookup.timeout)
            filters.append(F.as_filter(F.contains_child(child)))

        for name in selector.traits:
            filters.append(build_trait_filter(name).filter_func)

        final_filter = F.intersect(filters)
        if selector.index is not None:
            final_filter = F.compose([final_filter, F.index(selector.index)])

        return FilterWithDescription(selector.description(), final_filter)
