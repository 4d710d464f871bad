"""
Producer Factory Module - Registry of technique producers.

Producer classes register themselves by name. Each solving technique maps
to one registered producer and the constructor arguments that select the
technique's variant (set size, fish degree, chaining options).
"""

from typing import Any, Dict, List, Tuple, Type

from ..techniques import SolvingTechnique
from .base import HintProducer


# Global registry of producer classes
_PRODUCERS: Dict[str, Type[HintProducer]] = {}

T = SolvingTechnique

# Producer name and constructor arguments of each technique
_TECHNIQUES: Dict[SolvingTechnique, Tuple[str, Dict[str, Any]]] = {
    T.HiddenSingle: ("hidden_single", {}),
    T.DirectPointing: ("locking", {"direct": True}),
    T.DirectHiddenPair: ("hidden_set", {"degree": 2, "direct": True}),
    T.NakedSingle: ("naked_single", {}),
    T.DirectHiddenTriplet: ("hidden_set", {"degree": 3, "direct": True}),
    T.PointingClaiming: ("locking", {}),
    T.NakedPair: ("naked_set", {"degree": 2}),
    T.XWing: ("fish", {"degree": 2}),
    T.HiddenPair: ("hidden_set", {"degree": 2}),
    T.NakedTriplet: ("naked_set", {"degree": 3}),
    T.Swordfish: ("fish", {"degree": 3}),
    T.HiddenTriplet: ("hidden_set", {"degree": 3}),
    T.XYWing: ("xy_wing", {}),
    T.DirectHiddenQuad: ("hidden_set", {"degree": 4, "direct": True}),
    T.XYZWing: ("xy_wing", {"xyz": True}),
    T.UniqueLoop: ("unique_loop", {}),
    T.NakedQuad: ("naked_set", {"degree": 4}),
    T.Jellyfish: ("fish", {"degree": 4}),
    T.HiddenQuad: ("hidden_set", {"degree": 4}),
    T.NakedQuintuplet: ("naked_set", {"degree": 5}),
    T.HiddenQuintuplet: ("hidden_set", {"degree": 5}),
    T.NakedSextuplet: ("naked_set", {"degree": 6}),
    T.HiddenSextuplet: ("hidden_set", {"degree": 6}),
    T.NakedSeptuplet: ("naked_set", {"degree": 7}),
    T.HiddenSeptuplet: ("hidden_set", {"degree": 7}),
    T.Starfish: ("fish", {"degree": 5}),
    T.Whale: ("fish", {"degree": 6}),
    T.Leviathan: ("fish", {"degree": 7}),
    T.NakedOctuplet: ("naked_set", {"degree": 8}),
    T.HiddenOctuplet: ("hidden_set", {"degree": 8}),
    T.LochNessMonster: ("fish", {"degree": 8}),
    T.BivalueUniversalGrave: ("bug", {}),
    T.AlignedPairExclusion: ("aligned_exclusion", {"degree": 2}),
    T.ForcingChainCycle: ("chaining", {}),
    T.AlignedTripletExclusion: ("aligned_exclusion", {"degree": 3}),
    T.NishioForcingChain: ("chaining", {"dynamic": True, "nishio": True}),
    T.MultipleForcingChain: ("chaining", {"multiple": True}),
    T.DynamicForcingChain: ("chaining", {"multiple": True, "dynamic": True}),
    T.DynamicForcingChainPlus: ("chaining", {"multiple": True, "dynamic": True, "level": 1}),
    # Tiers override the level and nesting
    T.NestedForcingChain: ("chaining", {"multiple": True, "dynamic": True, "level": 2}),
}


def register_producer(cls: Type[HintProducer]) -> Type[HintProducer]:
    """
    Decorator to register a producer class.

    Usage:
        @register_producer
        class NakedSingle(HintProducer):
            name = "naked_single"
            ...
    """
    _PRODUCERS[cls.name] = cls
    return cls


def create_producer(name: str, **kwargs: Any) -> HintProducer:
    """
    Create a producer instance by name.

    Args:
        name: Producer name (e.g., "naked_single", "naked_set")
        **kwargs: Additional arguments passed to producer constructor

    Returns:
        Producer instance

    Raises:
        ValueError: If producer name not found
    """
    if name not in _PRODUCERS:
        available = ", ".join(_PRODUCERS.keys())
        raise ValueError(f"Unknown producer: {name}. Available: {available}")
    return _PRODUCERS[name](**kwargs)


def create_technique_producer(technique: SolvingTechnique, **overrides: Any) -> HintProducer:
    """
    Create the producer implementing a solving technique.

    Args:
        technique: Technique to implement
        **overrides: Constructor arguments replacing the technique's defaults

    Returns:
        Producer instance

    Raises:
        ValueError: If no producer implements the technique
    """
    if technique not in _TECHNIQUES:
        raise ValueError(f"No producer implements {technique.name}")
    name, kwargs = _TECHNIQUES[technique]
    return create_producer(name, **{**kwargs, **overrides})


def get_producer_names() -> List[str]:
    """
    Get list of registered producer names.

    Returns:
        List of registered producer names
    """
    return list(_PRODUCERS.keys())


def get_producer_info() -> List[Dict[str, str]]:
    """
    Describe all registered producers and the techniques they implement.

    Returns:
        List of dicts with 'name', 'kind', 'description' and 'techniques'
        keys; 'techniques' is a comma-separated list of technique names
    """
    return [
        {
            "name": cls.name,
            "kind": cls.kind.value,
            "description": cls.description,
            "techniques": ", ".join(
                technique.name for technique, (name, _kwargs) in _TECHNIQUES.items()
                if name == cls.name
            ),
        }
        for cls in _PRODUCERS.values()
    ]
