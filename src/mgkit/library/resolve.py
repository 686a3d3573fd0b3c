"""Locating the samples a preset refers to.

A preset only stores file names. The hardware looks for each one in the
project folder first, then in Wavs, then in Recs. Locations are recomputed on
every call since the card can change underneath.
"""

from dataclasses import dataclass

from mgkit.library.structure import MultigrainStructure, Project, WavFile
from mgkit.preset import extract_samples_from_preset
from mgkit.types import PathLike, SampleLocation


@dataclass
class ResolvedSample:
    name: str
    location: SampleLocation
    sample: WavFile | None = None

    @property
    def found(self) -> bool:
        return self.location is not SampleLocation.NOT_FOUND


def _find_by_name(samples: list[WavFile], name: str) -> WavFile | None:
    return next((s for s in samples if s.name == name), None)


def resolve_sample_location(
    name: str,
    project: Project | None,
    structure: MultigrainStructure,
) -> ResolvedSample:
    """Resolve a sample name in the order PROJECT, WAVS, RECS.

    Names are matched exactly (case-sensitive), as on the device.
    """
    search_order = [
        (SampleLocation.WAVS, structure.global_wavs),
        (SampleLocation.RECS, structure.recordings),
    ]
    if project is not None:
        search_order.insert(0, (SampleLocation.PROJECT, project.samples))

    for location, samples in search_order:
        sample = _find_by_name(samples, name)
        if sample is not None:
            return ResolvedSample(name=name, location=location, sample=sample)

    return ResolvedSample(name=name, location=SampleLocation.NOT_FOUND)


def resolve_preset_samples(
    preset_path: PathLike,
    project: Project | None,
    structure: MultigrainStructure,
) -> list[ResolvedSample]:
    """Read a preset and resolve each of its sample slots.

    Raises:
        OSError: If the preset file cannot be read.
    """
    return [
        resolve_sample_location(name, project, structure)
        for name in extract_samples_from_preset(preset_path)
    ]
