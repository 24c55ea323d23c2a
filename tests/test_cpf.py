import random
import string
import unittest

from anamnese_api.services.cpf import format_cpf, is_valid_cpf, normalize_cpf


def generate_cpf(rng: random.Random) -> str:
    base = [rng.randint(0, 9) for _ in range(9)]
    for weight_start in (10, 11):
        total = sum(d * w for d, w in zip(base, range(weight_start, 1, -1)))
        rem = (total * 10) % 11
        base.append(0 if rem >= 10 else rem)
    return "".join(str(d) for d in base)


class NormalizeCpfTests(unittest.TestCase):
    def test_strips_punctuation(self):
        self.assertEqual(normalize_cpf("529.982.247-25"), "52998224725")
        self.assertEqual(normalize_cpf(" 529 982 247 25 "), "52998224725")

    def test_empty_and_none(self):
        self.assertEqual(normalize_cpf(""), "")
        self.assertEqual(normalize_cpf(None), "")

    def test_keeps_order_and_only_digits(self):
        rng = random.Random(42)
        alphabet = string.ascii_letters + string.digits + ".-/ ()"
        for _ in range(200):
            s = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 30)))
            out = normalize_cpf(s)
            self.assertTrue(all(ch in string.digits for ch in out))
            self.assertEqual(out, "".join(ch for ch in s if ch in string.digits))

    def test_does_not_enforce_length(self):
        self.assertEqual(normalize_cpf("12-3"), "123")

    def test_non_ascii_digits_are_removed(self):
        self.assertEqual(normalize_cpf("١٢٣4"), "4")


class IsValidCpfTests(unittest.TestCase):
    def test_known_valid(self):
        self.assertTrue(is_valid_cpf("52998224725"))
        self.assertTrue(is_valid_cpf("529.982.247-25"))
        self.assertTrue(is_valid_cpf("11144477735"))

    def test_single_digit_corruption(self):
        self.assertFalse(is_valid_cpf("52998224724"))
        self.assertFalse(is_valid_cpf("52998224735"))

    def test_repeated_digits_rejected(self):
        for d in string.digits:
            self.assertFalse(is_valid_cpf(d * 11))

    def test_wrong_length(self):
        self.assertFalse(is_valid_cpf(""))
        self.assertFalse(is_valid_cpf("5299822472"))
        self.assertFalse(is_valid_cpf("529982247250"))

    def test_generated_cpfs_are_valid(self):
        rng = random.Random(7)
        for _ in range(300):
            cpf = generate_cpf(rng)
            if cpf == cpf[0] * 11:
                continue
            self.assertTrue(is_valid_cpf(cpf), cpf)
            self.assertTrue(is_valid_cpf(format_cpf(cpf)), cpf)


class FormatCpfTests(unittest.TestCase):
    def test_format(self):
        self.assertEqual(format_cpf("52998224725"), "529.982.247-25")

    def test_short_input_returns_digits(self):
        self.assertEqual(format_cpf("12.3"), "123")


if __name__ == "__main__":
    unittest.main()
