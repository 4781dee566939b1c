from models.data_models import MessageGroup, NameLabel, OcrLine, Rectangle, Speaker, ThresholdPair, TimeLabel
from services.sender_classifier import SenderClassifier

W, H = 1000, 2000


def _group(*rows):
    return MessageGroup(lines=[OcrLine(t, Rectangle(l, top, w, h)) for t, l, top, w, h in rows])


class TestSenderClassifier:
    def setup_method(self):
        self.classifier = SenderClassifier()

    def test_right_anchored_bubble_is_me(self):
        group = _group(("안녕", 700, 100, 150, 40), ("저는 집에 가요", 680, 150, 220, 40))
        result = self.classifier.classify(group, W, H)
        assert result.speaker == Speaker.ME
        assert result.confidence >= 3
        assert "first person" in result.signals

    def test_left_anchored_bubble_is_other(self):
        group = _group(("hello", 50, 500, 200, 40))
        result = self.classifier.classify(group, W, H)
        assert result.speaker == Speaker.OTHER
        assert result.other_score == 8
        assert result.me_score == 0

    def test_no_signal_is_unknown(self):
        group = _group(("ok", 400, 1000, 200, 40))
        result = self.classifier.classify(group, W, H)
        assert result.speaker == Speaker.UNKNOWN
        assert result.confidence == 0

    def test_time_label_side(self):
        group = _group(("ok", 400, 1000, 200, 40))
        left = self.classifier.classify(group, W, H, time_labels=[TimeLabel(350, 1005)])
        right = self.classifier.classify(group, W, H, time_labels=[TimeLabel(650, 1000)])
        assert (left.speaker, left.confidence) == (Speaker.ME, 2)
        assert (right.speaker, right.confidence) == (Speaker.OTHER, 2)

    def test_distant_time_label_is_ignored(self):
        group = _group(("ok", 400, 1000, 200, 40))
        result = self.classifier.classify(group, W, H, time_labels=[TimeLabel(350, 1400)])
        assert result.speaker == Speaker.UNKNOWN

    def test_partner_name_above(self):
        group = _group(("ok", 400, 1000, 200, 40))
        labels = [NameLabel("태용", Rectangle(420, 900, 80, 40))]
        with_name = self.classifier.classify(group, W, H, partner_name="태용", name_labels=labels)
        without_name = self.classifier.classify(group, W, H, partner_name=None, name_labels=labels)
        assert with_name.speaker == Speaker.OTHER
        assert without_name.speaker == Speaker.UNKNOWN

    def test_second_person_pronoun(self):
        group = _group(("너 뭐해", 400, 1000, 200, 40))
        result = self.classifier.classify(group, W, H)
        assert (result.speaker, result.confidence) == (Speaker.OTHER, 1)

    def test_calibrated_thresholds_are_used(self):
        group = _group(("ok", 400, 1000, 200, 40))
        result = self.classifier.classify(group, W, H, thresholds=ThresholdPair(300, 480))
        assert result.speaker == Speaker.ME

    def test_mirrored_group_swaps_speaker(self):
        left = self.classifier.classify(_group(("hello", 80, 1000, 200, 40)), W, H)
        right = self.classifier.classify(_group(("hello", 720, 1000, 200, 40)), W, H)
        assert left.speaker == Speaker.OTHER
        assert right.speaker == Speaker.ME
