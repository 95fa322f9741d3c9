from django.test import SimpleTestCase

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions


class MediaDescriptorTests(SimpleTestCase):
    def test_tv_defaults_season_and_episode(self):
        descriptor = MediaDescriptor("tv", 42)
        self.assertEqual((descriptor.season, descriptor.episode), (1, 1))

    def test_non_positive_episode_numbers_default_to_one(self):
        descriptor = MediaDescriptor("tv", 42, season=0, episode=-3)
        self.assertEqual((descriptor.season, descriptor.episode), (1, 1))

    def test_movie_ignores_season_episode_for_equality(self):
        self.assertEqual(
            MediaDescriptor("movie", 550, season=2, episode=3),
            MediaDescriptor(MediaKind.MOVIE, "550"),
        )

    def test_tv_equality_uses_episode(self):
        self.assertEqual(
            MediaDescriptor("tv", "42", 2, 5),
            MediaDescriptor(MediaKind.TV, 42, 2, 5),
        )
        self.assertNotEqual(
            MediaDescriptor("tv", "42", 2, 5),
            MediaDescriptor("tv", "42", 2, 6),
        )

    def test_float_ids_from_json_collapse(self):
        self.assertEqual(MediaDescriptor("movie", 42.0).id, "42")

    def test_unknown_kind_rejected(self):
        with self.assertRaises(ValueError):
            MediaDescriptor("podcast", 1)

    def test_secondary_id_only_for_anime(self):
        self.assertIsNone(MediaDescriptor("movie", 1, secondary_id="x").secondary_id)
        self.assertEqual(MediaDescriptor("anime", 1, secondary_id="x").secondary_id, "x")

    def test_with_episode(self):
        descriptor = MediaDescriptor("tv", 42, 1, 1).with_episode(3, 4)
        self.assertEqual(descriptor.identity(), ("tv", "42", 3, 4))


class PlaybackOptionsTests(SimpleTestCase):
    def test_from_mapping_accepts_camel_case(self):
        options = PlaybackOptions.from_mapping({
            "color": "#66ccff",
            "autoPlay": "true",
            "nextEpisode": False,
            "episodeSelector": "0",
            "startAt": "90.5",
            "server": "alpha",
        })
        self.assertEqual(
            options,
            PlaybackOptions(
                color="#66ccff",
                autoplay=True,
                next_episode=False,
                episode_selector=False,
                start_at=90.5,
                server="alpha",
            ),
        )

    def test_from_mapping_drops_garbage(self):
        options = PlaybackOptions.from_mapping({
            "autoplay": "maybe",
            "startAt": "-5",
            "muted": "",
            "unknown": "x",
        })
        self.assertEqual(options, PlaybackOptions())
        self.assertEqual(options.as_dict(), {})

    def test_replace(self):
        options = PlaybackOptions(autoplay=True).replace(start_at=30.0)
        self.assertEqual(options.as_dict(), {"autoplay": True, "start_at": 30.0})

    def test_from_mapping_ignores_non_mappings(self):
        for raw in ("color", ["autoplay"], 7):
            with self.subTest(raw=raw):
                self.assertEqual(PlaybackOptions.from_mapping(raw), PlaybackOptions())
