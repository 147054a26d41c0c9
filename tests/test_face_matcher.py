import json

import pytest

from models.face_record import EnrolledFace
from services.realtime.face_matcher import average_descriptors, match


def test_identical_descriptor_matches_with_full_confidence():
	descriptor = [0.12, -0.4, 0.33, 0.05]
	gallery = [EnrolledFace(label="Abi", descriptors=[list(descriptor)])]

	result = match(descriptor, gallery)

	assert result.label == "Abi"
	assert result.confidence == 1.0


def test_far_descriptor_is_unknown():
	gallery = [EnrolledFace(label="Abi", descriptors=[[0.0, 0.0, 0.0, 0.0]])]

	assert match([1.0, 1.0, 1.0, 1.0], gallery) is None


def test_distance_at_threshold_is_rejected():
	gallery = [EnrolledFace(label="Abi", descriptors=[[0.0, 0.0]])]

	assert match([0.6, 0.0], gallery) is None
	assert match([0.59, 0.0], gallery).label == "Abi"


def test_closest_label_wins():
	gallery = [
		EnrolledFace(label="Sam", descriptors=[[0.3, 0.0]]),
		EnrolledFace(label="Abi", descriptors=[[0.1, 0.0]]),
	]

	result = match([0.0, 0.0], gallery)

	assert result.label == "Abi"
	assert result.confidence == pytest.approx(0.9)


def test_every_sample_of_a_label_is_considered():
	gallery = [
		EnrolledFace(label="Sam", descriptors=[[0.2, 0.0]]),
		EnrolledFace(label="Abi", descriptors=[[0.5, 0.0], [0.05, 0.0]]),
	]

	assert match([0.0, 0.0], gallery).label == "Abi"


def test_ties_go_to_the_first_label():
	gallery = [
		EnrolledFace(label="Abi", descriptors=[[0.1, 0.0]]),
		EnrolledFace(label="Sam", descriptors=[[-0.1, 0.0]]),
	]

	assert match([0.0, 0.0], gallery).label == "Abi"


def test_empty_gallery_and_mismatched_entries():
	assert match([0.1, 0.2], []) is None
	gallery = [
		EnrolledFace(label="Short", descriptors=[[0.1]]),
		EnrolledFace(label="Empty", descriptors=[]),
	]
	assert match([0.1, 0.2], gallery) is None


def test_custom_threshold():
	gallery = [EnrolledFace(label="Abi", descriptors=[[0.0, 0.0]])]

	assert match([0.3, 0.0], gallery, threshold=0.2) is None


def test_average_descriptors():
	assert average_descriptors([[0.0, 1.0], [0.2, 3.0]]) == pytest.approx([0.1, 2.0])
	with pytest.raises(ValueError):
		average_descriptors([])


def test_nan_descriptor_never_matches():
	gallery = [EnrolledFace(label="Abi", descriptors=[[0.1, 0.2, 0.3]])]

	assert match(json.loads("[NaN, 0.2, 0.3]"), gallery) is None
