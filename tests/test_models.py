"""
Unit tests for data models (assets, analyzed photos, clusters and results).
"""

import pytest
from photosweep.models import (
    AnalysisResult,
    AnalyzedPhoto,
    DuplicateCluster,
    MediaAsset,
    MediaKind,
    QualityTier,
    format_size,
)


def make_photo(identifier, quality=QualityTier.GOOD, size=0):
    return AnalyzedPhoto(asset=MediaAsset(identifier), quality=quality, file_size=size)


class TestFormatSize:
    """Test the format_size utility function."""

    def test_bytes(self):
        assert format_size(500) == "500.0 B"

    def test_kilobytes(self):
        assert format_size(2048) == "2.0 KB"

    def test_megabytes(self):
        assert format_size(5242880) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(3221225472) == "3.0 GB"

    def test_zero(self):
        assert format_size(0) == "0.0 B"


class TestQualityTier:
    """Test tier ordering and display."""

    def test_rank_order(self):
        tiers = [QualityTier.BLURRY, QualityTier.POOR, QualityTier.FAIR,
                 QualityTier.GOOD, QualityTier.EXCELLENT]
        ranks = [t.rank for t in tiers]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 5

    def test_display_name(self):
        assert QualityTier.EXCELLENT.display_name == "Excellent"
        assert QualityTier.BLURRY.display_name == "Blurry"


class TestMediaAsset:
    """Test MediaAsset data class."""

    def test_defaults(self):
        asset = MediaAsset("a")
        assert asset.kind == MediaKind.IMAGE
        assert not asset.is_video
        assert asset.created_at is None

    def test_video(self):
        assert MediaAsset("v", kind=MediaKind.VIDEO).is_video

    def test_estimated_size(self):
        asset = MediaAsset("a", pixel_width=100, pixel_height=50)
        assert asset.estimated_size == 100 * 50 * 4

    def test_estimated_size_unknown_dimensions(self):
        assert MediaAsset("a").estimated_size == 0

    def test_immutable(self):
        asset = MediaAsset("a")
        with pytest.raises(AttributeError):
            asset.identifier = "b"


class TestAnalyzedPhoto:
    """Test AnalyzedPhoto data class."""

    def test_creation(self):
        photo = make_photo("a", QualityTier.FAIR, 1024)
        assert photo.identifier == "a"
        assert photo.quality == QualityTier.FAIR
        assert photo.file_size == 1024
        assert photo.fingerprint is None
        assert not photo.is_duplicate
        assert not photo.in_cluster
        assert photo.similarity is None

    def test_formatted_size(self):
        assert make_photo("a", size=1048576).formatted_size == "1.0 MB"

    def test_equality_by_identifier(self):
        a1 = make_photo("a", QualityTier.GOOD, 1)
        a2 = make_photo("a", QualityTier.POOR, 2)
        assert a1 == a2
        assert hash(a1) == hash(a2)
        assert a1 != make_photo("b")

    def test_assign_to_cluster(self):
        photo = make_photo("a")
        photo.assign_to_cluster("c1", similarity=0.95)
        assert photo.cluster_id == "c1"
        assert photo.similarity == 0.95
        assert photo.is_duplicate
        assert photo.in_cluster

    def test_assign_anchor(self):
        photo = make_photo("a")
        photo.assign_to_cluster("c1", is_duplicate=False)
        assert photo.in_cluster
        assert not photo.is_duplicate
        assert photo.similarity is None

    def test_assign_twice_raises(self):
        photo = make_photo("a")
        photo.assign_to_cluster("c1")
        with pytest.raises(ValueError):
            photo.assign_to_cluster("c2")
        assert photo.cluster_id == "c1"

    def test_to_dict(self):
        photo = make_photo("a", QualityTier.POOR, 2048)
        data = photo.to_dict()
        assert data['identifier'] == "a"
        assert data['quality'] == "poor"
        assert data['file_size'] == 2048
        assert data['file_size_formatted'] == "2.0 KB"
        assert data['fingerprint'] is None
        assert data['cluster_id'] is None


class TestDuplicateCluster:
    """Test DuplicateCluster data class."""

    def test_reclaimable_bytes_keeps_best(self):
        cluster = DuplicateCluster(id="c", photos=[
            make_photo("a", QualityTier.GOOD, 100),
            make_photo("b", QualityTier.EXCELLENT, 250),
            make_photo("c", QualityTier.FAIR, 80),
        ])
        assert cluster.best_photo.identifier == "b"
        assert cluster.reclaimable_bytes == 180

    def test_ranked_photos(self):
        cluster = DuplicateCluster(id="c", photos=[
            make_photo("a", QualityTier.BLURRY),
            make_photo("b", QualityTier.GOOD),
            make_photo("c", QualityTier.POOR),
        ])
        assert [p.identifier for p in cluster.ranked_photos] == ["b", "c", "a"]
        assert [p.identifier for p in cluster.removable_photos] == ["c", "a"]

    def test_tie_keeps_first_member(self):
        cluster = DuplicateCluster(id="c", photos=[
            make_photo("a", QualityTier.GOOD, 10),
            make_photo("b", QualityTier.GOOD, 999),
        ])
        assert cluster.best_photo.identifier == "a"
        assert cluster.reclaimable_bytes == 999

    def test_anchor_and_count(self):
        photos = [make_photo("a"), make_photo("b")]
        cluster = DuplicateCluster(id="c", photos=photos)
        assert cluster.anchor is photos[0]
        assert cluster.image_count == 2

    def test_empty_cluster(self):
        cluster = DuplicateCluster(id="c")
        assert cluster.anchor is None
        assert cluster.best_photo is None
        assert cluster.reclaimable_bytes == 0

    def test_members_are_immutable(self):
        photos = [make_photo("a"), make_photo("b")]
        cluster = DuplicateCluster(id="c", photos=photos)
        photos.append(make_photo("x"))

        assert isinstance(cluster.photos, tuple)
        assert cluster.image_count == 2
        with pytest.raises(AttributeError):
            cluster.photos = ()
        with pytest.raises(AttributeError):
            cluster.photos.append(make_photo("y"))

    def test_result_clusters_cannot_be_edited(self):
        cluster = DuplicateCluster(id="c", photos=[make_photo("a"), make_photo("b", size=40)])
        result = AnalysisResult(clusters=(cluster,), total_reclaimable_bytes=40)

        with pytest.raises(TypeError):
            result.clusters[0].photos[1] = make_photo("z", size=999)
        assert result.clusters[0].reclaimable_bytes == 40

    def test_formatted_savings(self):
        cluster = DuplicateCluster(id="c", photos=[
            make_photo("a", QualityTier.GOOD, 0),
            make_photo("b", QualityTier.FAIR, 2048),
        ])
        assert cluster.formatted_savings == "2.0 KB"

    def test_to_dict(self):
        cluster = DuplicateCluster(id="ff00", photos=[
            make_photo("a", QualityTier.FAIR, 10),
            make_photo("b", QualityTier.GOOD, 20),
        ])
        data = cluster.to_dict()
        assert data['id'] == "ff00"
        assert data['image_count'] == 2
        assert data['best_identifier'] == "b"
        assert data['reclaimable_bytes'] == 10
        assert [p['identifier'] for p in data['photos']] == ["a", "b"]


class TestAnalysisResult:
    """Test AnalysisResult data class."""

    def test_empty(self):
        result = AnalysisResult()
        assert result.total_issues == 0
        assert result.formatted_savings == "0.0 B"

    def test_total_issues(self):
        cluster = DuplicateCluster(id="c", photos=[make_photo("a"), make_photo("b")])
        result = AnalysisResult(
            total_photos=5,
            clusters=(cluster,),
            low_quality_photos=(make_photo("c", QualityTier.POOR),),
            blurry_photos=(make_photo("d", QualityTier.BLURRY),),
        )
        assert result.total_issues == 4

    def test_immutable(self):
        result = AnalysisResult()
        with pytest.raises(AttributeError):
            result.total_photos = 3

    def test_to_dict(self):
        result = AnalysisResult(total_photos=3, total_videos=1,
                                total_reclaimable_bytes=1024, total_bytes=4096)
        data = result.to_dict()
        assert data['total_photos'] == 3
        assert data['total_videos'] == 1
        assert data['total_bytes'] == 4096
        assert data['total_reclaimable_bytes_formatted'] == "1.0 KB"
        assert data['clusters'] == []
