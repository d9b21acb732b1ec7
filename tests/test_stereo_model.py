"""
Tests for the stereo camera model, its pose file and depth conversions.

Test Coverage:
- Save/load round trip of left, right and extrinsic calibration
- Loading with and without the stereo transform
- Malformed pose files
- Scaling
- Depth <-> disparity conversions and zero sentinels
- Stereo transform assembly
"""

import logging

import numpy as np
import pytest


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def rectified_model():
    """Rectified pair: f=500, cx=320, 12 cm baseline."""
    from stereo_calib.calibration import StereoCameraModel

    return StereoCameraModel.from_rectified(
        fx=500.0, fy=500.0, cx=320.0, cy=240.0,
        baseline=0.12, width=640, height=480,
        name="zed",
    )


@pytest.fixture
def calibrated_model():
    """Unrectified pair with a small rotation and distortion."""
    from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

    left = CameraIntrinsics(
        fx=700.1, fy=699.8, cx=321.7, cy=243.2, width=640, height=480,
        D=[-0.28, 0.07, 0.0002, -0.0001, 0.0],
    )
    right = CameraIntrinsics(
        fx=701.3, fy=700.9, cx=318.4, cy=239.9, width=640, height=480,
        D=[-0.27, 0.06, 0.0001, 0.0003, 0.0],
    )

    angle = 0.01
    R = np.array([
        [np.cos(angle), 0, np.sin(angle)],
        [0, 1, 0],
        [-np.sin(angle), 0, np.cos(angle)],
    ])
    T = np.array([[-0.1197], [0.00031], [-0.0012]])

    model = StereoCameraModel(name="bumblebee", left=left, right=right, R=R, T=T)
    model.update_epipolar()
    return model


@pytest.fixture
def pose_block():
    """Build a rows/cols/data block."""
    def _block(rows, cols, data=None):
        if data is None:
            data = [0.0] * (rows * cols)
        return {"rows": rows, "cols": cols, "data": data}
    return _block


def _write_pose(directory, name, **blocks):
    from stereo_calib.utils.yaml_io import write_yaml

    calib = {"camera_name": name}
    calib.update(blocks)
    write_yaml(calib, directory / f"{name}_pose.yaml")


# =============================================================================
# Test Model Construction
# =============================================================================

class TestStereoCameraModel:
    """Tests for StereoCameraModel state."""

    def test_default_is_empty(self):
        """A new model is invalid with no extrinsics."""
        from stereo_calib.calibration import StereoCameraModel

        model = StereoCameraModel()

        assert not model.is_valid()
        assert model.R is None
        assert model.T is None
        assert model.E is None
        assert model.F is None

    def test_set_name_renames_sub_models(self):
        from stereo_calib.calibration import StereoCameraModel

        model = StereoCameraModel()
        model.set_name("zed")

        assert model.name == "zed"
        assert model.left.name == "zed_left"
        assert model.right.name == "zed_right"

    def test_shared_camera_is_copied(self, tmp_path):
        """One intrinsics object passed for both sides yields two cameras."""
        from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

        cam = CameraIntrinsics(fx=500, fy=500, cx=320, cy=240, width=640, height=480,
                               name="mono")

        model = StereoCameraModel(name="zed", left=cam, right=cam,
                                  R=np.eye(3), T=[-0.12, 0.0, 0.0])

        assert model.left is not model.right
        assert model.left.name == "zed_left"
        assert model.right.name == "zed_right"
        assert cam.name == "mono"

        assert model.save(tmp_path)
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "zed_left.yaml", "zed_pose.yaml", "zed_right.yaml",
        ]
        assert StereoCameraModel().load(tmp_path, "zed")

    def test_valid_without_extrinsics(self, rectified_model):
        """Validity only depends on the two cameras."""
        rectified_model.R = None
        rectified_model.T = None

        assert rectified_model.is_valid()
        assert not rectified_model.is_valid_for_rectification()

    def test_matrix_shapes_enforced(self):
        """Wrongly shaped extrinsics are rejected."""
        from stereo_calib.calibration import MalformedCalibrationError, StereoCameraModel

        with pytest.raises(MalformedCalibrationError):
            StereoCameraModel(R=np.eye(2))

        model = StereoCameraModel()
        with pytest.raises(MalformedCalibrationError):
            model.T = np.zeros(4)
        with pytest.raises(MalformedCalibrationError):
            model.F = np.zeros((3, 4))

    def test_flat_translation_stored_as_column(self):
        from stereo_calib.calibration import StereoCameraModel

        model = StereoCameraModel(T=[-0.1, 0.0, 0.0])

        assert model.T.shape == (3, 1)

    def test_from_rectified(self, rectified_model):
        """Rectified pair has identical intrinsics and an x baseline."""
        assert rectified_model.is_valid_for_rectification()
        assert rectified_model.left.fx == rectified_model.right.fx
        assert rectified_model.right.Tx == pytest.approx(-500.0 * 0.12)
        assert rectified_model.baseline() == pytest.approx(0.12)
        assert np.allclose(rectified_model.R, np.eye(3))
        assert np.allclose(rectified_model.T.flatten(), [-0.12, 0.0, 0.0])

    def test_update_epipolar(self, calibrated_model):
        """E = [T]x R and x_r^T F x_l = 0 for a projected point."""
        model = calibrated_model
        R, t = model.R, model.T.flatten()

        skew_t = np.array([
            [0, -t[2], t[1]],
            [t[2], 0, -t[0]],
            [-t[1], t[0], 0],
        ])
        assert np.allclose(model.E, skew_t @ R)

        point_left = np.array([0.3, -0.2, 4.0])
        point_right = R @ point_left + t
        pixel_left = model.left.K @ (point_left / point_left[2])
        pixel_right = model.right.K @ (point_right / point_right[2])

        assert abs(pixel_right @ model.F @ pixel_left) < 1e-9

    def test_update_epipolar_requires_extrinsics(self):
        from stereo_calib.calibration import StereoCameraModel

        model = StereoCameraModel()

        assert not model.update_epipolar()
        assert model.E is None

    def test_injected_logger_shared(self):
        """An injected logger is used by the model and both cameras."""
        from stereo_calib.calibration import StereoCameraModel

        logger = logging.getLogger("test.injected")
        model = StereoCameraModel(logger=logger)

        assert model.logger is logger
        assert model.left.logger is logger
        assert model.right.logger is logger


# =============================================================================
# Test Persistence
# =============================================================================

class TestStereoFiles:
    """Tests for StereoCameraModel save/load."""

    def test_save_writes_three_files(self, calibrated_model, tmp_path):
        assert calibrated_model.save(tmp_path)

        assert (tmp_path / "bumblebee_left.yaml").exists()
        assert (tmp_path / "bumblebee_right.yaml").exists()
        assert (tmp_path / "bumblebee_pose.yaml").exists()

    def test_roundtrip(self, calibrated_model, tmp_path):
        """load(save(M)) reproduces M within 1e-9."""
        from stereo_calib.calibration import StereoCameraModel

        assert calibrated_model.save(tmp_path)

        loaded = StereoCameraModel()
        assert loaded.load(tmp_path, "bumblebee")

        assert loaded.name == "bumblebee"
        assert loaded.left.name == "bumblebee_left"
        assert loaded.right.name == "bumblebee_right"
        for attr in ("R", "T", "E", "F"):
            assert np.allclose(getattr(loaded, attr), getattr(calibrated_model, attr), atol=1e-9)
        for side in ("left", "right"):
            original = getattr(calibrated_model, side)
            restored = getattr(loaded, side)
            for attr in ("fx", "fy", "cx", "cy"):
                assert getattr(restored, attr) == pytest.approx(getattr(original, attr), abs=1e-9)
            assert np.allclose(restored.D, original.D, atol=1e-9)

    def test_ignore_stereo_transform_load(self, rectified_model, tmp_path):
        """Left/right are enough when the transform is ignored."""
        from stereo_calib.calibration import StereoCameraModel

        assert rectified_model.save(tmp_path, ignore_stereo_transform=True)
        assert not (tmp_path / "zed_pose.yaml").exists()

        loaded = StereoCameraModel()
        assert loaded.load(tmp_path, "zed", ignore_stereo_transform=True)
        assert loaded.is_valid()
        assert loaded.stereo_transform().is_null

    def test_ignore_stereo_transform_with_pose_file(self, rectified_model, tmp_path):
        """An existing pose file is not read when ignored."""
        from stereo_calib.calibration import StereoCameraModel

        rectified_model.save(tmp_path)

        loaded = StereoCameraModel()
        assert loaded.load(tmp_path, "zed", ignore_stereo_transform=True)
        assert loaded.R is None
        assert loaded.T is None

    def test_missing_pose_file_fails(self, rectified_model, tmp_path, caplog):
        """Extrinsics are mandatory unless ignored."""
        from stereo_calib.calibration import StereoCameraModel

        rectified_model.save(tmp_path, ignore_stereo_transform=True)

        loaded = StereoCameraModel()
        with caplog.at_level(logging.WARNING):
            assert not loaded.load(tmp_path, "zed")

        assert "zed_pose.yaml" in caplog.text
        # Sub-models stay loaded
        assert loaded.left.is_valid()
        assert loaded.right.is_valid()
        assert loaded.R is None

    def test_missing_camera_file_fails(self, rectified_model, tmp_path):
        from stereo_calib.calibration import StereoCameraModel

        rectified_model.save(tmp_path)
        (tmp_path / "zed_right.yaml").unlink()

        assert not StereoCameraModel().load(tmp_path, "zed")
        assert not StereoCameraModel().load(tmp_path, "zed", ignore_stereo_transform=True)

    def test_load_empty_directory(self, tmp_path):
        from stereo_calib.calibration import StereoCameraModel

        assert not StereoCameraModel().load(tmp_path, "zed")

    def test_save_without_extrinsics_fails(self, rectified_model, tmp_path):
        """R and T are required to write the pose file."""
        rectified_model.R = None

        assert not rectified_model.save(tmp_path)
        assert not (tmp_path / "zed_pose.yaml").exists()
        assert rectified_model.save(tmp_path, ignore_stereo_transform=True)

    def test_save_unnamed_fails(self, tmp_path):
        from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

        model = StereoCameraModel(
            left=CameraIntrinsics(fx=1, fy=1, cx=1, cy=1),
            right=CameraIntrinsics(fx=1, fy=1, cx=1, cy=1),
        )

        assert not model.save(tmp_path)

    def test_camera_name_mismatch_keeps_requested_name(self, rectified_model, tmp_path, caplog):
        """The file's camera_name doesn't rename the model."""
        from stereo_calib.calibration import StereoCameraModel
        from stereo_calib.utils.yaml_io import read_yaml, write_yaml

        rectified_model.save(tmp_path)
        pose_path = tmp_path / "zed_pose.yaml"
        calib = read_yaml(pose_path)
        calib["camera_name"] = "other_camera"
        write_yaml(calib, pose_path)

        loaded = StereoCameraModel()
        with caplog.at_level(logging.WARNING):
            assert loaded.load(tmp_path, "zed")

        assert loaded.name == "zed"
        assert "other_camera" in caplog.text

    def test_load_opencv_pose_file(self, rectified_model, tmp_path):
        """Pose files written by OpenCV FileStorage are readable."""
        from stereo_calib.calibration import StereoCameraModel

        rectified_model.save(tmp_path, ignore_stereo_transform=True)
        (tmp_path / "zed_pose.yaml").write_text(
            "%YAML:1.0\n"
            "---\n"
            "camera_name: zed\n"
            "rotation_matrix:\n"
            "   rows: 3\n"
            "   cols: 3\n"
            "   data: [ 1., 0., 0., 0., 1., 0., 0., 0., 1. ]\n"
            "translation_matrix:\n"
            "   rows: 3\n"
            "   cols: 1\n"
            "   data: [ -1.2000000000000000e-01, 0., 0. ]\n"
        )

        loaded = StereoCameraModel()
        assert loaded.load(tmp_path, "zed")

        assert np.allclose(loaded.R, np.eye(3))
        assert np.allclose(loaded.T.flatten(), [-0.12, 0.0, 0.0])
        assert loaded.E is None
        assert loaded.F is None


# =============================================================================
# Test Pose File Codec
# =============================================================================

class TestExtrinsicsCodec:
    """Tests for load_extrinsics/save_extrinsics."""

    def test_absent_file_is_none(self, tmp_path):
        from stereo_calib.calibration import load_extrinsics

        assert load_extrinsics(tmp_path, "zed") is None

    def test_roundtrip(self, calibrated_model, tmp_path):
        from stereo_calib.calibration import load_extrinsics, save_extrinsics

        assert save_extrinsics(tmp_path, "bumblebee", calibrated_model.extrinsics)

        extrinsics = load_extrinsics(tmp_path, "bumblebee")

        assert extrinsics.camera_name == "bumblebee"
        assert extrinsics.T.shape == (3, 1)
        assert np.allclose(extrinsics.R, calibrated_model.R, atol=1e-9)
        assert np.allclose(extrinsics.F, calibrated_model.F, atol=1e-9)

    def test_file_layout(self, rectified_model, tmp_path):
        """Blocks are stored row-major with their shapes."""
        from stereo_calib.calibration import save_extrinsics
        from stereo_calib.utils.yaml_io import read_yaml

        save_extrinsics(tmp_path, "zed", rectified_model.extrinsics)
        calib = read_yaml(tmp_path / "zed_pose.yaml")

        assert list(calib) == [
            "camera_name",
            "rotation_matrix",
            "translation_matrix",
            "essential_matrix",
            "fundamental_matrix",
        ]
        assert calib["rotation_matrix"]["rows"] == 3
        assert calib["rotation_matrix"]["cols"] == 3
        assert calib["translation_matrix"] == {"rows": 3, "cols": 1, "data": [-0.12, 0.0, 0.0]}

    def test_save_requires_rotation_and_translation(self, tmp_path):
        """Nothing is written without name, R and T."""
        from stereo_calib.calibration import StereoExtrinsics, save_extrinsics

        assert not save_extrinsics(tmp_path, "zed", StereoExtrinsics(R=np.eye(3)))
        assert not save_extrinsics(tmp_path, "zed", StereoExtrinsics(T=np.zeros(3)))
        assert not save_extrinsics(
            tmp_path, "", StereoExtrinsics(R=np.eye(3), T=np.zeros(3))
        )
        assert list(tmp_path.iterdir()) == []

    def test_save_omits_empty_epipolar_blocks(self, tmp_path):
        from stereo_calib.calibration import StereoExtrinsics, save_extrinsics
        from stereo_calib.utils.yaml_io import read_yaml

        assert save_extrinsics(tmp_path, "zed", StereoExtrinsics(R=np.eye(3), T=np.zeros(3)))
        calib = read_yaml(tmp_path / "zed_pose.yaml")

        assert "essential_matrix" not in calib
        assert "fundamental_matrix" not in calib

    def test_rotation_2x2_is_fatal(self, tmp_path, pose_block):
        """A consistent but wrongly shaped block raises, not returns False."""
        from stereo_calib.calibration import MalformedCalibrationError, load_extrinsics

        _write_pose(
            tmp_path, "zed",
            rotation_matrix=pose_block(2, 2, [1.0, 0.0, 0.0, 1.0]),
            translation_matrix=pose_block(3, 1),
        )

        with pytest.raises(MalformedCalibrationError):
            load_extrinsics(tmp_path, "zed")

    @pytest.mark.parametrize("missing", ["rotation_matrix", "translation_matrix"])
    def test_missing_required_block_is_fatal(self, tmp_path, pose_block, missing):
        from stereo_calib.calibration import MalformedCalibrationError, load_extrinsics

        blocks = {
            "rotation_matrix": pose_block(3, 3),
            "translation_matrix": pose_block(3, 1),
        }
        del blocks[missing]
        _write_pose(tmp_path, "zed", **blocks)

        with pytest.raises(MalformedCalibrationError, match=missing):
            load_extrinsics(tmp_path, "zed")

    def test_model_load_rejects_name_only_pose_file(self, rectified_model, tmp_path):
        """A pose file with no R/T blocks doesn't load as a valid stereo model."""
        from stereo_calib.calibration import MalformedCalibrationError, StereoCameraModel

        rectified_model.save(tmp_path, ignore_stereo_transform=True)
        _write_pose(tmp_path, "zed")

        with pytest.raises(MalformedCalibrationError):
            StereoCameraModel().load(tmp_path, "zed")

    def test_data_length_mismatch_is_fatal(self, tmp_path, pose_block):
        from stereo_calib.calibration import MalformedCalibrationError, load_extrinsics

        _write_pose(
            tmp_path, "zed",
            rotation_matrix=pose_block(3, 3),
            translation_matrix=pose_block(3, 1, [0.0, 0.0]),
        )

        with pytest.raises(MalformedCalibrationError, match="translation_matrix"):
            load_extrinsics(tmp_path, "zed")

    def test_wrong_fundamental_shape_is_fatal(self, tmp_path, pose_block):
        from stereo_calib.calibration import MalformedCalibrationError, load_extrinsics

        _write_pose(
            tmp_path, "zed",
            rotation_matrix=pose_block(3, 3),
            translation_matrix=pose_block(3, 1),
            fundamental_matrix=pose_block(1, 9),
        )

        with pytest.raises(MalformedCalibrationError):
            load_extrinsics(tmp_path, "zed")

    def test_model_load_propagates_schema_violation(self, rectified_model, tmp_path, pose_block):
        """StereoCameraModel.load doesn't turn corruption into False."""
        from stereo_calib.calibration import MalformedCalibrationError, StereoCameraModel

        rectified_model.save(tmp_path, ignore_stereo_transform=True)
        _write_pose(
            tmp_path, "zed",
            rotation_matrix=pose_block(2, 2, [1.0, 0.0, 0.0, 1.0]),
        )

        with pytest.raises(MalformedCalibrationError):
            StereoCameraModel().load(tmp_path, "zed")

    def test_record_validates_shapes(self):
        from stereo_calib.calibration import MalformedCalibrationError, StereoExtrinsics

        with pytest.raises(MalformedCalibrationError):
            StereoExtrinsics(E=np.eye(4))


# =============================================================================
# Test Scaling
# =============================================================================

class TestStereoScaling:
    """Tests for StereoCameraModel.scale."""

    def test_scale_preserves_extrinsics(self, calibrated_model):
        scaled = calibrated_model.scale(0.5)

        for attr in ("R", "T", "E", "F"):
            assert np.array_equal(getattr(scaled, attr), getattr(calibrated_model, attr))

    def test_scale_intrinsics_linear(self, calibrated_model):
        scaled = calibrated_model.scale(0.5)

        for side in ("left", "right"):
            original = getattr(calibrated_model, side)
            half = getattr(scaled, side)
            assert half.fx == pytest.approx(original.fx * 0.5)
            assert half.fy == pytest.approx(original.fy * 0.5)
            assert half.cx == pytest.approx(original.cx * 0.5)
            assert half.cy == pytest.approx(original.cy * 0.5)

    def test_scale_composes(self, calibrated_model):
        """scale(s1).scale(s2) == scale(s1 * s2) for intrinsics."""
        chained = calibrated_model.scale(0.8).scale(0.625)
        direct = calibrated_model.scale(0.5)

        for side in ("left", "right"):
            for attr in ("fx", "fy", "cx", "cy"):
                assert getattr(getattr(chained, side), attr) == pytest.approx(
                    getattr(getattr(direct, side), attr), abs=1e-9
                )

    def test_scale_returns_new_model(self, rectified_model):
        scaled = rectified_model.scale(2.0)

        assert scaled is not rectified_model
        assert rectified_model.left.fx == 500.0
        assert scaled.name == "zed"
        assert scaled.left.name == "zed_left"

    def test_scale_keeps_baseline(self, rectified_model):
        """Baseline is metric and independent of resolution."""
        assert rectified_model.scale(0.5).baseline() == pytest.approx(0.12)

    def test_scaled_copy_is_independent(self, calibrated_model):
        """Mutating the scaled extrinsics doesn't touch the original."""
        scaled = calibrated_model.scale(1.0)
        scaled.R[0, 0] = 42.0

        assert calibrated_model.R[0, 0] != 42.0


# =============================================================================
# Test Depth / Disparity
# =============================================================================

class TestDepthDisparity:
    """Tests for the depth/disparity conversions."""

    def test_known_depth(self, rectified_model):
        """depth = b * f / d = 0.12 * 500 / 30 = 2 m."""
        assert rectified_model.compute_depth(30.0) == pytest.approx(2.0)

    def test_known_disparity(self, rectified_model):
        assert rectified_model.compute_disparity(2.0) == pytest.approx(30.0)
        assert rectified_model.compute_disparity_mm(2000) == pytest.approx(30.0)

    @pytest.mark.parametrize("depth", [0.3, 1.0, 2.5, 17.0, 80.0])
    def test_inverse_law(self, rectified_model, depth):
        """compute_depth(compute_disparity(z)) == z."""
        disparity = rectified_model.compute_disparity(depth)

        assert rectified_model.compute_depth(disparity) == pytest.approx(depth, rel=1e-9)

    def test_zero_sentinels(self, rectified_model):
        assert rectified_model.compute_depth(0) == 0.0
        assert rectified_model.compute_depth(0.0) == 0.0
        assert rectified_model.compute_disparity(0.0) == 0.0
        assert rectified_model.compute_disparity_mm(0) == 0.0

    def test_zero_sentinel_without_division(self, rectified_model):
        """0 maps to 0 even when the formula would divide by zero."""
        from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

        model = StereoCameraModel(
            left=CameraIntrinsics(fx=500, fy=500, cx=320, cy=240),
            right=CameraIntrinsics(fx=500, fy=500, cx=320, cy=240),
        )

        # No baseline at all: b * f / d would be 0 / 0 for d = 0
        assert model.compute_depth(0.0) == 0.0
        assert model.compute_disparity(0.0) == 0.0

    def test_principal_point_offset(self):
        """cx_right - cx_left shifts the disparity."""
        from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

        model = StereoCameraModel(
            left=CameraIntrinsics(fx=500, fy=500, cx=320, cy=240),
            right=CameraIntrinsics(fx=500, fy=500, cx=330, cy=240),
            T=[-0.12, 0.0, 0.0],
        )

        # depth = 60 / (d + 10)
        assert model.compute_depth(50.0) == pytest.approx(1.0)
        assert model.compute_disparity(1.0) == pytest.approx(50.0)

    def test_disparity_image(self, rectified_model):
        """Arrays convert element-wise; zeros stay zero."""
        disparity = np.array([[0.0, 30.0], [60.0, 0.0]], dtype=np.float32)

        depth = rectified_model.compute_depth(disparity)

        assert depth.shape == (2, 2)
        assert np.allclose(depth, [[0.0, 2.0], [1.0, 0.0]])

    def test_depth_image_millimeters(self, rectified_model):
        depth_mm = np.array([0, 1000, 2000], dtype=np.uint16)

        disparity = rectified_model.compute_disparity_mm(depth_mm)

        assert np.allclose(disparity, [0.0, 60.0, 30.0])

    def test_fractional_millimeters_rejected(self, rectified_model):
        """Millimeter depths aren't truncated."""
        assert rectified_model.compute_disparity_mm(2000.0) == pytest.approx(30.0)

        with pytest.raises(ValueError, match="integral"):
            rectified_model.compute_disparity_mm(2500.7)
        with pytest.raises(ValueError):
            rectified_model.compute_disparity_mm(np.array([1000.0, 1500.5]))

    def test_depth_image_meters(self, rectified_model):
        disparity = rectified_model.compute_disparity(np.array([0.0, 1.0, 2.0]))

        assert np.allclose(disparity, [0.0, 60.0, 30.0])

    def test_invalid_model_is_fatal(self):
        """Conversions on an uncalibrated model raise."""
        from stereo_calib.calibration import InvalidCalibrationError, StereoCameraModel

        model = StereoCameraModel(name="empty")

        with pytest.raises(InvalidCalibrationError):
            model.compute_depth(10.0)
        with pytest.raises(InvalidCalibrationError):
            model.compute_disparity(0.0)
        with pytest.raises(InvalidCalibrationError):
            model.compute_disparity_mm(1000)

    def test_standalone_functions(self, rectified_model):
        from stereo_calib.calibration import compute_depth, compute_disparity

        assert compute_depth(rectified_model, 30.0) == pytest.approx(2.0)
        assert compute_disparity(rectified_model, 2.0) == pytest.approx(30.0)


# =============================================================================
# Test Baseline
# =============================================================================

class TestBaseline:
    """Tests for baseline derivation."""

    def test_baseline_from_projection(self, rectified_model):
        """Right projection Tx takes precedence over T."""
        rectified_model.T = [-5.0, 0.0, 0.0]

        assert rectified_model.baseline() == pytest.approx(0.12)

    def test_baseline_from_translation(self):
        from stereo_calib.calibration import CameraIntrinsics, StereoCameraModel

        model = StereoCameraModel(
            left=CameraIntrinsics(fx=500, fy=500, cx=320, cy=240),
            right=CameraIntrinsics(fx=500, fy=500, cx=320, cy=240),
            T=[-0.2, 0.001, 0.0],
        )

        assert model.baseline() == pytest.approx(0.2)

    def test_no_baseline(self):
        from stereo_calib.calibration import StereoCameraModel

        assert StereoCameraModel().baseline() == 0.0


# =============================================================================
# Test Stereo Transform
# =============================================================================

class TestStereoTransform:
    """Tests for stereo_transform."""

    def test_transform_from_extrinsics(self, calibrated_model):
        transform = calibrated_model.stereo_transform()

        assert not transform.is_null
        assert np.array_equal(transform.R, calibrated_model.R)
        assert np.array_equal(transform.t, calibrated_model.T.flatten())

        T = transform.get_transform_matrix()
        assert np.array_equal(T[:3, :3], calibrated_model.R)
        assert np.array_equal(T[:3, 3], calibrated_model.T.flatten())

    def test_missing_translation_gives_identity(self, calibrated_model):
        calibrated_model.T = None

        transform = calibrated_model.stereo_transform()

        assert transform.is_null
        assert transform.is_identity()

    def test_missing_rotation_gives_identity(self, calibrated_model):
        calibrated_model.R = None

        assert calibrated_model.stereo_transform().is_null

    def test_does_not_require_valid_model(self):
        """Only R and T are needed."""
        from stereo_calib.calibration import StereoCameraModel, stereo_transform

        model = StereoCameraModel(R=np.eye(3), T=[0.5, 0.0, 0.0])
        transform = stereo_transform(model)

        assert not transform.is_null
        assert np.allclose(transform.t, [0.5, 0.0, 0.0])
